"""
Shared fixtures: an in-process fake of the chain registry and the explorers.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from blockscout_mcp.api.blockscout_api import BlockscoutAPI
from blockscout_mcp.tools import OnChainData

REGISTRY_URL = "https://registry.test"
REGISTRY_HOST = "registry.test"
ETH_EXPLORER_URL = "https://eth.blockscout.test/"
BASE_EXPLORER_URL = "https://base.blockscout.test/"


def chain_payload(name: str, explorers: List[str], is_testnet: bool = False) -> Dict[str, Any]:
    return {
        "name": name,
        "description": f"{name} network",
        "isTestnet": is_testnet,
        "explorers": [{"url": url, "hostedBy": "blockscout"} for url in explorers],
    }


class FakeUpstream:
    """
    Serves canned registry and explorer responses and records every request.

    Explorer routes map a URL path to ``(status, json_body)``; a ``bytes`` body
    is sent raw. Unknown explorer paths answer ``{"items": []}``.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.chains: Dict[int, Dict[str, Any]] = {
            1: chain_payload("Ethereum", [ETH_EXPLORER_URL]),
            8453: chain_payload("Base", [BASE_EXPLORER_URL]),
        }
        self.registry_status: Optional[int] = None
        self.registry_error: Optional[Exception] = None
        self.registry_gate: Optional[asyncio.Event] = None
        self.explorer_routes: Dict[str, Tuple[int, Any]] = {}
        self.explorer_error: Optional[Exception] = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == REGISTRY_HOST:
            return await self._registry(request)
        return self._explorer(request)

    async def _registry(self, request: httpx.Request) -> httpx.Response:
        if self.registry_gate is not None:
            await self.registry_gate.wait()
        if self.registry_error is not None:
            raise self.registry_error
        if self.registry_status is not None:
            return httpx.Response(self.registry_status, json={"error": "unavailable"})

        chain_id = int(request.url.path.rsplit("/", 1)[-1])
        if chain_id not in self.chains:
            return httpx.Response(404, json={"error": "Chain not found"})
        return httpx.Response(200, json=self.chains[chain_id])

    def _explorer(self, request: httpx.Request) -> httpx.Response:
        if self.explorer_error is not None:
            raise self.explorer_error
        status, body = self.explorer_routes.get(request.url.path, (200, {"items": []}))
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def registry_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == REGISTRY_HOST]

    def explorer_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host != REGISTRY_HOST]


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def api(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    return BlockscoutAPI(client=client, registry_url=REGISTRY_URL)


@pytest.fixture
def tools(api):
    return OnChainData(api)
