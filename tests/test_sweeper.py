import asyncio
import unittest

from plugin.anti_delete.cache import CachedMessage, MessageCache
from plugin.anti_delete.hooks import FailureCounter
from plugin.anti_delete.sweeper import CacheSweeper

from .fakes import FakeClock


class _BrokenCache(MessageCache):
    def __init__(self) -> None:
        super().__init__(300)
        self.calls = 0

    def sweep(self, now=None) -> int:
        self.calls += 1
        raise RuntimeError("boom")


class TestCacheSweeper(unittest.IsolatedAsyncioTestCase):
    async def test_sweeps_periodically_until_stopped(self) -> None:
        clock = FakeClock()
        cache = MessageCache(300, clock=clock)
        cache.put("M1", CachedMessage(sender_id="A", chat_id="G1", content="x"))
        clock.advance(301)

        sweeper = CacheSweeper(cache, 0.01)
        sweeper.start()
        self.assertTrue(sweeper.running)
        await asyncio.sleep(0.05)

        self.assertNotIn("M1", cache)

        await sweeper.stop()
        self.assertFalse(sweeper.running)

        cache.put("M2", CachedMessage(sender_id="A", chat_id="G1", content="y"))
        clock.advance(301)
        await asyncio.sleep(0.03)
        self.assertIn("M2", cache)

    async def test_start_twice_and_stop_twice(self) -> None:
        sweeper = CacheSweeper(MessageCache(300), 60)
        await sweeper.stop()

        sweeper.start()
        task = sweeper._task
        sweeper.start()
        self.assertIs(sweeper._task, task)

        await sweeper.stop()
        await sweeper.stop()
        self.assertTrue(task.cancelled())

    async def test_failing_sweep_is_reported_and_loop_continues(self) -> None:
        cache = _BrokenCache()
        counter = FailureCounter()
        sweeper = CacheSweeper(cache, 0.01, on_failure=counter)

        sweeper.start()
        await asyncio.sleep(0.06)
        await sweeper.stop()

        self.assertGreaterEqual(cache.calls, 2)
        self.assertEqual(counter.counts["sweep"], cache.calls)


if __name__ == "__main__":
    unittest.main()
