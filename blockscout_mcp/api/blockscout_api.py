"""
blockscout_api.py

This module resolves chain ids to Blockscout explorer URLs and forwards API calls
to the resolved explorer.

Explorer URLs come from the chain registry (``{registry}/api/chains/{chain_id}``)
and are cached for the lifetime of the process. Explorer calls are single GET
requests to ``{explorer}api/v2/{path}``; the JSON body is returned verbatim.
There are no retries and no pagination handling.
"""

import time
from typing import Any, Mapping, Optional

import httpx
from prometheus_client import Counter, Histogram

from blockscout_mcp.api.errors import (
    BlockscoutAPIError,
    DecodeFailed,
    LookupFailed,
    NoExplorerAvailable,
    RequestFailed,
    UpstreamUnavailable,
)
from blockscout_mcp.api.models import ChainRecord
from blockscout_mcp.api.operations import Operation, get_operation
from blockscout_mcp.cache.chain_cache import ChainCache
from blockscout_mcp.utils.config import get_config
from blockscout_mcp.utils.logger import get_logger

logger = get_logger(__name__)

# Merlin is not served by the registry; its explorer is pinned.
MERLIN_CHAIN_ID = 4200
MERLIN_EXPLORER_URL = "https://scan.merlinverify.com/"

chain_cache_hits = Counter(
    'chain_cache_hits_total',
    'Total number of chain lookups served from the cache.'
)

chain_cache_misses = Counter(
    'chain_cache_misses_total',
    'Total number of chain lookups that required a registry fetch.'
)

chain_registry_fetches = Counter(
    'chain_registry_fetches_total',
    'Total number of chain registry fetches.',
    ['outcome']
)

explorer_requests = Counter(
    'explorer_requests_total',
    'Total number of explorer API requests.',
    ['operation', 'outcome']
)

explorer_request_duration = Histogram(
    'explorer_request_duration_seconds',
    'Latency of explorer API requests in seconds.',
    ['operation']
)


class BlockscoutAPI:
    """
    BlockscoutAPI resolves explorers and forwards explorer API calls.

    One instance is shared by every concurrent tool call; the chain cache it owns
    is the only shared mutable state.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None,
                 registry_url: Optional[str] = None,
                 cache: Optional[ChainCache] = None):
        """
        Initializes the BlockscoutAPI.

        :param client: HTTP client to use. One is created lazily when omitted.
        :param registry_url: Base URL of the chain registry.
        :param cache: Chain cache to use. A fresh one is created when omitted.
        """
        config = get_config()
        self.registry_url = (registry_url or config.CHAIN_REGISTRY_URL).rstrip("/")
        self.cache = cache if cache is not None else ChainCache()
        self._client = client
        self._owns_client = client is None

        logger.info(f"BlockscoutAPI initialized with registry {self.registry_url}")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            config = get_config()
            self._client = httpx.AsyncClient(
                timeout=config.REQUEST_TIMEOUT,
                headers={"User-Agent": config.USER_AGENT, "Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Closes the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BlockscoutAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ==================== Chain resolution ====================

    async def get_chain(self, chain_id: int) -> ChainRecord:
        """
        Returns the registry record of a chain, fetching it on first use.

        Concurrent first lookups of the same chain id share one registry fetch.
        Lookups of different chain ids never wait on each other's fetch.

        :param chain_id: The chain id.
        :return: The chain record.
        :raises LookupFailed: If the registry could not provide a record.
        """
        record = await self.cache.get(chain_id)
        if record is not None:
            chain_cache_hits.inc()
            return record

        async with self.cache.fetch_lock(chain_id):
            # another task may have fetched it while we waited
            record = await self.cache.get(chain_id)
            if record is not None:
                chain_cache_hits.inc()
                return record

            chain_cache_misses.inc()
            record = await self._fetch_chain(chain_id)
            await self.cache.put(chain_id, record)

        return record

    async def _fetch_chain(self, chain_id: int) -> ChainRecord:
        url = f"{self.registry_url}/api/chains/{chain_id}"
        logger.info(f"Fetching chain {chain_id} from registry")

        try:
            response = await self.client.get(url)
        except httpx.HTTPError as err:
            chain_registry_fetches.labels(outcome="error").inc()
            logger.error(f"Registry request for chain {chain_id} failed: {err}")
            raise LookupFailed(chain_id, str(err) or type(err).__name__) from err

        if response.status_code != httpx.codes.OK:
            chain_registry_fetches.labels(outcome="error").inc()
            logger.error(f"Registry returned {response.status_code} for chain {chain_id}")
            raise LookupFailed(chain_id, f"request failed: {response.status_code}")

        try:
            record = ChainRecord.model_validate(response.json())
        except ValueError as err:
            chain_registry_fetches.labels(outcome="error").inc()
            logger.error(f"Registry returned an unusable record for chain {chain_id}: {err}")
            raise LookupFailed(chain_id, f"invalid chain record: {err}") from err

        chain_registry_fetches.labels(outcome="success").inc()
        logger.info(f"Resolved chain {chain_id} ({record.name}) with "
                    f"{len(record.explorers)} explorer(s)")
        return record

    async def resolve_explorer_url(self, chain_id: int) -> str:
        """
        Returns the base URL of the primary explorer of a chain.

        :param chain_id: The chain id.
        :return: Explorer base URL, always ending with '/'.
        :raises LookupFailed: If the registry could not provide a record.
        :raises NoExplorerAvailable: If the chain lists no explorer.
        """
        if chain_id == MERLIN_CHAIN_ID:
            return MERLIN_EXPLORER_URL

        record = await self.get_chain(chain_id)
        url = record.explorer_url
        if url is None:
            raise NoExplorerAvailable(chain_id)
        if not url.endswith("/"):
            url = f"{url}/"
        return url

    # ==================== Request forwarding ====================

    async def request(self, chain_id: int, path: str,
                      params: Optional[Mapping[str, Any]] = None,
                      operation: str = "request") -> Any:
        """
        Issues ``GET {explorer}api/v2/{path}`` for a chain.

        :param chain_id: The chain id.
        :param path: Path relative to ``api/v2/``.
        :param params: Query parameters. Empty values are dropped.
        :param operation: Operation name used for metrics and logs.
        :return: The decoded JSON body.
        :raises UpstreamUnavailable: If the explorer URL could not be resolved.
        :raises RequestFailed: If the explorer did not answer with 200.
        :raises DecodeFailed: If the body is not valid JSON.
        """
        try:
            base_url = await self.resolve_explorer_url(chain_id)
        except BlockscoutAPIError as err:
            explorer_requests.labels(operation=operation, outcome="unavailable").inc()
            raise UpstreamUnavailable(chain_id, err) from err

        url = f"{base_url}api/v2/{path}"
        query = {
            key: value for key, value in (params or {}).items()
            if value is not None and value != ""
        }

        logger.debug(f"GET {url} params={query}")
        start_time = time.time()
        try:
            response = await self.client.get(url, params=query)
        except httpx.HTTPError as err:
            explorer_requests.labels(operation=operation, outcome="error").inc()
            logger.error(f"Request to {url} failed: {err}")
            raise RequestFailed(url, None, str(err) or type(err).__name__) from err
        finally:
            explorer_request_duration.labels(operation=operation).observe(time.time() - start_time)

        if response.status_code != httpx.codes.OK:
            explorer_requests.labels(operation=operation, outcome="error").inc()
            logger.warning(f"Explorer returned {response.status_code} for {url}")
            raise RequestFailed(url, response.status_code, response.reason_phrase)

        try:
            data = response.json()
        except ValueError as err:
            explorer_requests.labels(operation=operation, outcome="decode_error").inc()
            logger.error(f"Explorer returned invalid JSON for {url}: {err}")
            raise DecodeFailed(url, str(err)) from err

        explorer_requests.labels(operation=operation, outcome="success").inc()
        return data

    async def call(self, operation: Any, arguments: Mapping[str, Any]) -> Any:
        """
        Validates tool arguments and forwards one table-driven operation.

        :param operation: An Operation or an operation name.
        :param arguments: Tool arguments: chain_id, identifiers and filters.
        :return: The decoded JSON body.
        :raises UnknownOperation: If the operation name is not in the table.
        :raises pydantic.ValidationError: If the arguments are invalid.
        """
        if not isinstance(operation, Operation):
            operation = get_operation(operation)

        validated = operation.request_model.model_validate(dict(arguments)).model_dump()
        path = operation.build_path(validated)
        query = operation.build_query(validated)
        return await self.request(validated["chain_id"], path, query, operation=operation.name)
