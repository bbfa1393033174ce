"""
Exceptions raised while resolving chains and forwarding explorer requests.
"""

from typing import Optional


class BlockscoutAPIError(Exception):
    """Base exception for chain resolution and explorer requests."""


class LookupFailed(BlockscoutAPIError):
    """The chain registry was unreachable or did not return a usable record."""

    def __init__(self, chain_id: int, reason: str):
        self.chain_id = chain_id
        self.reason = reason
        super().__init__(f"chain {chain_id} lookup failed: {reason}")


class NoExplorerAvailable(BlockscoutAPIError):
    """The chain is known to the registry but lists no explorer."""

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"chain {chain_id} has no explorers")


class UpstreamUnavailable(BlockscoutAPIError):
    """The explorer base URL for a chain could not be resolved."""

    def __init__(self, chain_id: int, cause: BlockscoutAPIError):
        self.chain_id = chain_id
        self.cause = cause
        super().__init__(f"explorer for chain {chain_id} unavailable: {cause}")


class RequestFailed(BlockscoutAPIError):
    """
    The explorer API answered with a non-success status.

    ``status_code`` is None when the request never got a response.
    """

    def __init__(self, url: str, status_code: Optional[int], reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            message = f"request failed: {reason}"
        else:
            message = f"request failed: {status_code}"
            if reason:
                message = f"{message} {reason}"
        super().__init__(message)


class DecodeFailed(BlockscoutAPIError):
    """The explorer API response body was not valid JSON."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"invalid JSON from {url}: {reason}")
