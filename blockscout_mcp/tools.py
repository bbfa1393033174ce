"""
tools.py

Tool catalogue shared by the MCP and HTTP surfaces.

Every explorer operation in the table is a tool, plus ``get_merlin_chain_info``,
which answers from static data.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from blockscout_mcp.api.blockscout_api import BlockscoutAPI, MERLIN_CHAIN_ID
from blockscout_mcp.api.errors import BlockscoutAPIError
from blockscout_mcp.api.operations import OPERATIONS, UnknownOperation, get_operation
from blockscout_mcp.utils.logger import get_logger
from blockscout_mcp.utils.sentry import add_breadcrumb, capture_exception

logger = get_logger(__name__)

MERLIN_CHAIN_INFO_TOOL = "get_merlin_chain_info"

MERLIN_CHAIN_INFO = {
    "chain_id": str(MERLIN_CHAIN_ID),
    "native_token_symbol": "BTC",
    "native_token_decimals": "18",
    "note": "The native token on merlin is BTC, but the decimals of merlin BTC is 18, "
            "so 1 merlin BTC = 1 * 10^18 wei",
}

SERVER_INSTRUCTIONS = "This server provides a tool for query blockchains on-chain data"


def to_text(result: Any) -> str:
    """Pretty-prints a tool result the way it is returned to agents."""
    return json.dumps(result, indent=2, ensure_ascii=False)


class OnChainData:
    """
    Lists and dispatches tools.

    Attributes:
        api (BlockscoutAPI): The explorer client every tool call goes through.
    """

    def __init__(self, api: Optional[BlockscoutAPI] = None):
        self.api = api if api is not None else BlockscoutAPI()

    def list_tools(self) -> List[Dict[str, Any]]:
        """
        Describes every tool.

        Returns:
            List[Dict[str, Any]]: ``{name, description, input_schema}`` per tool.
        """
        tools = [
            {
                "name": op.name,
                "description": op.description,
                "input_schema": op.input_schema(),
            }
            for op in OPERATIONS
        ]
        tools.append({
            "name": MERLIN_CHAIN_INFO_TOOL,
            "description": "Get Merlin chain info",
            "input_schema": {"type": "object", "properties": {}},
        })
        return tools

    def has_tool(self, name: str) -> bool:
        if name == MERLIN_CHAIN_INFO_TOOL:
            return True
        try:
            get_operation(name)
        except UnknownOperation:
            return False
        return True

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Runs one tool.

        Args:
            name (str): Tool name.
            arguments (Optional[Mapping[str, Any]]): Tool arguments.

        Returns:
            Any: The JSON value produced by the tool.

        Raises:
            UnknownOperation: If no tool has this name.
            ValidationError: If the arguments do not match the tool's schema.
            BlockscoutAPIError: If the explorer call failed.
        """
        arguments = arguments or {}
        if name == MERLIN_CHAIN_INFO_TOOL:
            return dict(MERLIN_CHAIN_INFO)

        operation = get_operation(name)
        add_breadcrumb(f"tool {name}", category="tool", data={"arguments": dict(arguments)})

        try:
            return await self.api.call(operation, arguments)
        except ValidationError as err:
            logger.warning(f"Invalid arguments for {name}: {err.error_count()} error(s)")
            raise
        except BlockscoutAPIError as err:
            logger.error(f"Tool {name} failed: {err}")
            capture_exception(err, context={
                "tool": {"name": name, "chain_id": arguments.get("chain_id")}
            })
            raise
