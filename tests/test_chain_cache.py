"""
Tests for the chain record cache and its reader/writer lock.
"""

import asyncio
import gc

import pytest

from blockscout_mcp.api.models import ChainRecord
from blockscout_mcp.cache import ChainCache, ReadWriteLock


def _record(name="Ethereum", explorers=("https://eth.blockscout.test/",)):
    return ChainRecord.model_validate({
        "name": name,
        "isTestnet": False,
        "explorers": [{"url": url} for url in explorers],
    })


class TestReadWriteLock:
    """Tests for ReadWriteLock"""

    @pytest.mark.asyncio
    async def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        entered = asyncio.Event()
        release = asyncio.Event()
        inside = []

        async def reader(i):
            async with lock.read():
                inside.append(i)
                if len(inside) == 3:
                    entered.set()
                await release.wait()

        tasks = [asyncio.create_task(reader(i)) for i in range(3)]
        await asyncio.wait_for(entered.wait(), timeout=1)

        assert lock.readers == 3
        release.set()
        await asyncio.gather(*tasks)
        assert lock.readers == 0

    @pytest.mark.asyncio
    async def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        release = asyncio.Event()
        order = []

        async def reader():
            async with lock.read():
                order.append("read")
                await release.wait()
                order.append("read done")

        async def writer():
            async with lock.write():
                order.append("write")

        reader_task = asyncio.create_task(reader())
        await asyncio.sleep(0)
        writer_task = asyncio.create_task(writer())
        await asyncio.sleep(0.01)

        assert order == ["read"]
        release.set()
        await asyncio.gather(reader_task, writer_task)
        assert order == ["read", "read done", "write"]

    @pytest.mark.asyncio
    async def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        release = asyncio.Event()
        order = []

        async def writer():
            async with lock.write():
                order.append("write")
                await release.wait()
                order.append("write done")

        async def reader():
            async with lock.read():
                order.append("read")

        writer_task = asyncio.create_task(writer())
        await asyncio.sleep(0)
        reader_task = asyncio.create_task(reader())
        await asyncio.sleep(0.01)

        assert lock.writing
        assert order == ["write"]
        release.set()
        await asyncio.gather(writer_task, reader_task)
        assert order == ["write", "write done", "read"]

    @pytest.mark.asyncio
    async def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        release = asyncio.Event()
        order = []

        async def first_reader():
            async with lock.read():
                await release.wait()

        async def writer():
            async with lock.write():
                order.append("write")

        async def late_reader():
            async with lock.read():
                order.append("late read")

        tasks = [asyncio.create_task(first_reader())]
        await asyncio.sleep(0)
        tasks.append(asyncio.create_task(writer()))
        await asyncio.sleep(0)
        tasks.append(asyncio.create_task(late_reader()))
        await asyncio.sleep(0.01)

        assert order == []
        release.set()
        await asyncio.gather(*tasks)
        assert order == ["write", "late read"]

    @pytest.mark.asyncio
    async def test_cancelled_writer_releases_waiting_readers(self):
        lock = ReadWriteLock()
        release = asyncio.Event()
        order = []

        async def first_reader():
            async with lock.read():
                await release.wait()

        async def writer():
            async with lock.write():
                order.append("write")

        async def late_reader():
            async with lock.read():
                order.append("late read")

        holder = asyncio.create_task(first_reader())
        await asyncio.sleep(0)
        writer_task = asyncio.create_task(writer())
        await asyncio.sleep(0)
        reader_task = asyncio.create_task(late_reader())
        await asyncio.sleep(0.01)

        writer_task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await writer_task

        await asyncio.wait_for(reader_task, timeout=1)
        assert order == ["late read"]
        release.set()
        await holder

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            async with lock.write():
                raise RuntimeError("boom")

        assert not lock.writing
        async with lock.read():
            assert lock.readers == 1


class TestChainCache:
    """Tests for ChainCache"""

    @pytest.mark.asyncio
    async def test_empty_cache(self):
        cache = ChainCache()

        assert await cache.get(1) is None
        assert len(cache) == 0
        assert 1 not in cache
        assert cache.chain_ids() == []

    @pytest.mark.asyncio
    async def test_put_then_get(self):
        cache = ChainCache()
        record = _record()

        await cache.put(1, record)

        assert await cache.get(1) is record
        assert 1 in cache
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_last_write_wins(self):
        cache = ChainCache()
        await cache.put(1, _record("first"))
        await cache.put(1, _record("second"))

        assert (await cache.get(1)).name == "second"
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_chain_ids_sorted(self):
        cache = ChainCache()
        for chain_id in (8453, 1, 100):
            await cache.put(chain_id, _record())

        assert cache.chain_ids() == [1, 100, 8453]

    @pytest.mark.asyncio
    async def test_concurrent_puts_for_distinct_ids(self):
        cache = ChainCache()

        await asyncio.gather(*(cache.put(i, _record(str(i))) for i in range(20)))

        assert len(cache) == 20
        assert (await cache.get(7)).name == "7"

    def test_fetch_lock_is_per_chain(self):
        cache = ChainCache()

        assert cache.fetch_lock(1) is cache.fetch_lock(1)
        assert cache.fetch_lock(1) is not cache.fetch_lock(2)

    def test_fetch_lock_dropped_when_unreferenced(self):
        cache = ChainCache()
        lock = cache.fetch_lock(1)
        assert len(cache._fetch_locks) == 1

        del lock
        gc.collect()

        assert len(cache._fetch_locks) == 0

    def test_record_without_explorers(self):
        record = _record(explorers=())

        assert record.explorers == []
        assert record.explorer_url is None
