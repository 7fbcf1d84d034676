import asyncio

import pytest

from app.utils.locks import KeyedLock


class TestKeyedLock:

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self):
        locks = KeyedLock()
        events = []

        async def worker(name):
            async with locks.hold("client-1"):
                events.append(f"{name}:in")
                await asyncio.sleep(0)
                events.append(f"{name}:out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a:in", "a:out", "b:in", "b:out"]

    @pytest.mark.asyncio
    async def test_different_keys_interleave(self):
        locks = KeyedLock()
        events = []

        async def worker(key):
            async with locks.hold(key):
                events.append(f"{key}:in")
                await asyncio.sleep(0)
                events.append(f"{key}:out")

        await asyncio.gather(worker("client-1"), worker("client-2"))

        assert events == ["client-1:in", "client-2:in", "client-1:out", "client-2:out"]

    @pytest.mark.asyncio
    async def test_released_keys_are_dropped(self):
        locks = KeyedLock()

        async with locks.hold("client-1"):
            assert len(locks) == 1

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_released_on_error(self):
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.hold("client-1"):
                raise RuntimeError("boom")

        assert len(locks) == 0
        async with locks.hold("client-1"):
            pass
