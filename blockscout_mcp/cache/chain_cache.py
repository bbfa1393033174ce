"""
In-memory cache of chain registry records.

Maps a chain id to its ChainRecord for the lifetime of the process. Entries are
never evicted, refreshed or expired, and failed lookups are never stored.

Access is guarded by a reader/writer lock: any number of readers may look up
records concurrently, while an insert excludes readers and other writers.
A per-chain fetch lock lets callers serialise the registry fetch for a single
chain id without holding the cache-wide lock across network I/O. Fetch locks
are held weakly and disappear once no task holds or awaits them.
"""

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, List, Optional

from prometheus_client import Gauge

from blockscout_mcp.utils.logger import get_logger

if TYPE_CHECKING:
    from blockscout_mcp.api.models import ChainRecord

logger = get_logger(__name__)

chain_cache_entries = Gauge(
    'chain_cache_entries',
    'Number of chain records currently cached.'
)


class ReadWriteLock:
    """
    asyncio reader/writer lock.

    Writers are preferred: once a writer is waiting, new readers queue behind it
    so a steady stream of lookups cannot starve an insert.
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writing(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and not self._waiting_writers
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and not self._readers
                )
            finally:
                self._waiting_writers -= 1
                # readers blocked on a cancelled writer must be woken
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class ChainCache:
    """
    Process-wide chain id -> ChainRecord map.

    Attributes:
        lock (ReadWriteLock): Guards every read and write of the map.
    """

    def __init__(self):
        self._records: Dict[int, "ChainRecord"] = {}
        self._fetch_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self.lock = ReadWriteLock()

    async def get(self, chain_id: int) -> Optional["ChainRecord"]:
        """
        Looks up a cached record.

        Args:
            chain_id (int): The chain id.

        Returns:
            Optional[ChainRecord]: The cached record, or None if absent.
        """
        async with self.lock.read():
            return self._records.get(chain_id)

    async def put(self, chain_id: int, record: "ChainRecord") -> None:
        """
        Stores a record. The last writer for a chain id wins.

        Args:
            chain_id (int): The chain id.
            record (ChainRecord): The record fetched from the registry.
        """
        async with self.lock.write():
            self._records[chain_id] = record
            size = len(self._records)

        chain_cache_entries.set(size)
        logger.debug(f"Cached chain {chain_id} ({record.name}), {size} chains cached")

    def fetch_lock(self, chain_id: int) -> asyncio.Lock:
        """
        Returns the lock that serialises registry fetches for one chain id.

        Args:
            chain_id (int): The chain id.

        Returns:
            asyncio.Lock: The same lock object for every call with this chain id
                while any caller still references it.
        """
        lock = self._fetch_locks.get(chain_id)
        if lock is None:
            lock = self._fetch_locks[chain_id] = asyncio.Lock()
        return lock

    def chain_ids(self) -> List[int]:
        """Returns the cached chain ids, sorted."""
        return sorted(self._records)

    def __contains__(self, chain_id: int) -> bool:
        return chain_id in self._records

    def __len__(self) -> int:
        return len(self._records)
