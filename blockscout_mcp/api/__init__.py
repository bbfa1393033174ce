"""
API Module

This module resolves chain ids to Blockscout explorers and forwards explorer API calls.
"""

from blockscout_mcp.api.blockscout_api import BlockscoutAPI, MERLIN_CHAIN_ID, MERLIN_EXPLORER_URL
from blockscout_mcp.api.errors import (
    BlockscoutAPIError,
    DecodeFailed,
    LookupFailed,
    NoExplorerAvailable,
    RequestFailed,
    UpstreamUnavailable,
)
from blockscout_mcp.api.models import ChainRecord, ExplorerDescriptor
from blockscout_mcp.api.operations import OPERATIONS, Operation, UnknownOperation, get_operation

__all__ = [
    'BlockscoutAPI',
    'MERLIN_CHAIN_ID',
    'MERLIN_EXPLORER_URL',
    'BlockscoutAPIError',
    'DecodeFailed',
    'LookupFailed',
    'NoExplorerAvailable',
    'RequestFailed',
    'UpstreamUnavailable',
    'ChainRecord',
    'ExplorerDescriptor',
    'OPERATIONS',
    'Operation',
    'UnknownOperation',
    'get_operation',
]
