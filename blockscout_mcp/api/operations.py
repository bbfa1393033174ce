"""
operations.py

Declarative table of the explorer API operations exposed as tools.

Each operation is a relative path template under ``api/v2/`` plus the optional
string filters it forwards as query parameters. Identifier slots in the path
template (``{address_hash}``, ``{token_id}``, ...) become required tool
arguments; every operation also takes ``chain_id``.
"""

from dataclasses import dataclass, field
from functools import cached_property
from string import Formatter
from typing import Any, Dict, Mapping, Tuple, Type, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, create_model

CHAIN_ID_DESCRIPTION = "the chain id to query"

# slot name -> (python type, field constraints, description)
IDENTIFIER_SLOTS: Dict[str, Tuple[Any, Dict[str, Any], str]] = {
    "transaction_hash": (str, {"min_length": 1}, "the transaction hash to query"),
    "number_or_hash": (Union[str, int], {}, "the block number or block hash to query"),
    "address_hash": (str, {"min_length": 1}, "the address hash to query"),
    "token_address": (str, {"min_length": 1}, "the token address to query"),
    "token_id": (int, {"ge": 0}, "the token id to query"),
}


class UnknownOperation(LookupError):
    """Raised when a tool name does not match any operation."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown tool: {name}")


@dataclass(frozen=True)
class Filter:
    """An optional query parameter. Empty values are never sent."""

    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class Operation:
    """
    One explorer API call.

    Attributes:
        name (str): Tool name.
        path (str): Path template relative to ``{explorer}api/v2/``.
        description (str): Tool description shown to agents.
        filters (Tuple[Filter, ...]): Query parameters the endpoint accepts.
    """

    name: str
    path: str
    description: str
    filters: Tuple[Filter, ...] = field(default_factory=tuple)

    @cached_property
    def slots(self) -> Tuple[str, ...]:
        """Identifier slots of the path template, in order of appearance."""
        return tuple(
            slot for _, slot, _, _ in Formatter().parse(self.path) if slot
        )

    @cached_property
    def request_model(self) -> Type[BaseModel]:
        """Pydantic model validating the tool arguments."""
        fields: Dict[str, Any] = {
            "chain_id": (int, Field(..., description=CHAIN_ID_DESCRIPTION)),
        }
        for slot in self.slots:
            python_type, constraints, description = IDENTIFIER_SLOTS[slot]
            fields[slot] = (python_type, Field(..., description=description, **constraints))
        for query_filter in self.filters:
            default = ... if query_filter.required else ""
            fields[query_filter.name] = (str, Field(default, description=query_filter.description))

        model_name = "".join(part.title() for part in self.name.split("_")) + "Request"
        return create_model(
            model_name,
            __config__=ConfigDict(extra="ignore", coerce_numbers_to_str=True),
            **fields,
        )

    def input_schema(self) -> Dict[str, Any]:
        """JSON schema of the tool arguments."""
        return self.request_model.model_json_schema()

    def build_path(self, identifiers: Mapping[str, Any]) -> str:
        """
        Substitutes identifier values into the path template.

        Raises:
            KeyError: If an identifier slot has no value.
        """
        values = {
            slot: quote(str(identifiers[slot]), safe="") for slot in self.slots
        }
        return self.path.format(**values)

    def build_query(self, arguments: Mapping[str, Any]) -> Dict[str, str]:
        """Collects the non-empty filter values, keyed by query parameter name."""
        query = {}
        for query_filter in self.filters:
            value = arguments.get(query_filter.name)
            if value is None or value == "":
                continue
            query[query_filter.name] = str(value)
        return query


_TYPE_TRANSACTIONS = Filter(
    "type",
    "transaction types to include, comma separated: token_transfer, contract_creation, "
    "contract_call, coin_transfer, token_creation",
)
_METHOD = Filter("method", "method names to include, comma separated, e.g. approve, transfer")
_FILTER_DIRECTION = Filter("filter", "'to' or 'from' to keep only incoming or outgoing items")
_FILTER_POOL = Filter("filter", "'pending' or 'validated'")
_TYPE_BLOCKS = Filter("type", "block type: block, uncle or reorg")
_TYPE_TOKENS = Filter("type", "token types, comma separated: ERC-20, ERC-721, ERC-1155, ERC-404")
_TYPE_NFTS = Filter("type", "NFT types, comma separated: ERC-721, ERC-404, ERC-1155")
_TOKEN = Filter("token", "token contract address to restrict transfers to")
_SEARCH_QUERY = Filter(
    "q",
    "the query to search, it can be token name, token symbol, address, transaction hash, "
    "block number, block hash",
    required=True,
)
_TOKEN_QUERY = Filter("q", "token name or symbol to match")


OPERATIONS: Tuple[Operation, ...] = (
    Operation(
        "search", "search",
        "Search chain data with token name, token symbol, account name, address, transaction hash",
        (_SEARCH_QUERY,),
    ),
    Operation(
        "get_transactions", "transactions", "List latest 50 transactions",
        (_FILTER_POOL, _TYPE_TRANSACTIONS, _METHOD),
    ),
    Operation("get_blocks", "blocks", "List latest 50 blocks", (_TYPE_BLOCKS,)),
    Operation("get_transfers", "token-transfers", "List latest 50 token transfers"),
    Operation(
        "get_internal_transactions", "internal-transactions",
        "List latest 50 internal transactions",
    ),
    Operation("get_withdrawals", "withdrawals", "List latest 50 withdrawals"),
    Operation("get_chain_stats", "stats", "Get chain stats counters"),

    # transactions
    Operation("get_transaction_info", "transactions/{transaction_hash}", "Get transaction info"),
    Operation(
        "get_transaction_token_transfers", "transactions/{transaction_hash}/token-transfers",
        "Get transaction token transfers", (_TYPE_TOKENS,),
    ),
    Operation(
        "get_transaction_internal_transactions",
        "transactions/{transaction_hash}/internal-transactions",
        "Get transaction internal transactions",
    ),
    Operation(
        "get_transaction_logs", "transactions/{transaction_hash}/logs", "Get transaction logs",
    ),
    Operation(
        "get_transaction_summary", "transactions/{transaction_hash}/summary",
        "Get transaction summary",
    ),

    # blocks
    Operation("get_block_info", "blocks/{number_or_hash}", "Get block info"),
    Operation(
        "get_block_transactions", "blocks/{number_or_hash}/transactions",
        "Get block transactions",
    ),
    Operation(
        "get_block_withdrawals", "blocks/{number_or_hash}/withdrawals", "Get block withdrawals",
    ),

    # addresses
    Operation("get_addresses", "addresses", "List top 50 native coin holders"),
    Operation("get_address_info", "addresses/{address_hash}", "Get address info"),
    Operation(
        "get_address_counters", "addresses/{address_hash}/counters", "Get address counters",
    ),
    Operation(
        "get_address_transactions", "addresses/{address_hash}/transactions",
        "List latest 50 transactions of the address", (_FILTER_DIRECTION,),
    ),
    Operation(
        "get_address_token_transfers", "addresses/{address_hash}/token-transfers",
        "List latest 50 token transfers of the address",
        (_TYPE_TOKENS, _FILTER_DIRECTION, _TOKEN),
    ),
    Operation(
        "get_address_internal_transactions", "addresses/{address_hash}/internal-transactions",
        "List latest 50 internal transactions of the address", (_FILTER_DIRECTION,),
    ),
    Operation("get_address_logs", "addresses/{address_hash}/logs", "Get address logs"),
    Operation(
        "get_address_tokens", "addresses/{address_hash}/tokens", "Get address tokens",
        (_TYPE_TOKENS,),
    ),
    Operation(
        "get_address_coin_balance_history", "addresses/{address_hash}/coin-balance-history",
        "Get address coin balance history",
    ),
    Operation(
        "get_address_coin_balance_history_by_day",
        "addresses/{address_hash}/coin-balance-history-by-day",
        "Get address coin balance history by day",
    ),
    Operation(
        "get_address_withdrawals", "addresses/{address_hash}/withdrawals",
        "Get address withdrawals",
    ),
    Operation("get_address_nfts", "addresses/{address_hash}/nft", "Get address NFTs", (_TYPE_NFTS,)),
    Operation(
        "get_address_nft_collections", "addresses/{address_hash}/nft/collections",
        "Get address NFT collections", (_TYPE_NFTS,),
    ),

    # tokens
    Operation(
        "get_tokens", "tokens", "List top 50 tokens with the most holders",
        (_TOKEN_QUERY, _TYPE_TOKENS),
    ),
    Operation("get_token_info", "tokens/{token_address}", "Get token info"),
    Operation(
        "get_token_transfers", "tokens/{token_address}/transfers",
        "List latest 50 transfers of the token",
    ),
    Operation(
        "get_token_holders", "tokens/{token_address}/holders", "List top 50 holders of the token",
    ),
    Operation("get_token_counters", "tokens/{token_address}/counters", "Get token counters"),
    Operation(
        "get_token_instances", "tokens/{token_address}/instances",
        "List first 50 instances of the NFT",
    ),
    Operation(
        "get_token_instance_info", "tokens/{token_address}/instances/{token_id}",
        "Get NFT instance info",
    ),
    Operation(
        "get_token_instance_transfers", "tokens/{token_address}/instances/{token_id}/transfers",
        "List latest 50 transfers of the NFT instance",
    ),
    Operation(
        "get_token_instance_holders", "tokens/{token_address}/instances/{token_id}/holders",
        "List first 50 holders of the NFT instance",
    ),
    Operation(
        "get_token_instance_transfers_count",
        "tokens/{token_address}/instances/{token_id}/transfers-count",
        "Get the NFT instance transfers count",
    ),
)

_OPERATIONS_BY_NAME: Dict[str, Operation] = {op.name: op for op in OPERATIONS}


def get_operation(name: str) -> Operation:
    """
    Looks up an operation by tool name.

    Raises:
        UnknownOperation: If no operation has this name.
    """
    try:
        return _OPERATIONS_BY_NAME[name]
    except KeyError:
        raise UnknownOperation(name) from None
