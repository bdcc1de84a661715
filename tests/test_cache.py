import unittest

from plugin.anti_delete.cache import CachedMessage, MessageCache
from plugin.anti_delete.models import MediaKind

from .fakes import FakeClock


class TestMessageCache(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = MessageCache(300, clock=self.clock)

    def test_put_stamps_capture_time_and_get_returns_entry(self) -> None:
        entry = CachedMessage(
            sender_id="A",
            chat_id="G1",
            content="hi",
            media=b"\x89PNG",
            media_kind=MediaKind.IMAGE,
            mimetype="image/png",
            captured_at=1.0,
        )
        self.cache.put("M1", entry)

        got = self.cache.get("M1")
        self.assertIsNotNone(got)
        self.assertEqual(got.captured_at, self.clock.now)
        self.assertEqual(got.content, "hi")
        self.assertEqual(got.media, b"\x89PNG")
        self.assertEqual(got.media_kind, MediaKind.IMAGE)
        self.assertEqual(got.mimetype, "image/png")
        self.assertEqual((got.sender_id, got.chat_id), ("A", "G1"))

    def test_last_write_wins(self) -> None:
        self.cache.put("M1", CachedMessage(sender_id="A", chat_id="G1", content="old"))
        self.clock.advance(10)
        self.cache.put("M1", CachedMessage(sender_id="A", chat_id="G1", content="new"))

        self.assertEqual(len(self.cache), 1)
        self.assertEqual(self.cache.get("M1").content, "new")
        self.assertEqual(self.cache.get("M1").captured_at, self.clock.now)

    def test_get_does_not_refresh_ttl(self) -> None:
        self.cache.put("M1", CachedMessage(sender_id="A", chat_id="G1", content="x"))
        self.clock.advance(200)
        self.assertIsNotNone(self.cache.get("M1"))
        self.clock.advance(101)

        self.assertEqual(self.cache.sweep(), 1)
        self.assertIsNone(self.cache.get("M1"))

    def test_remove_returns_entry_once(self) -> None:
        self.cache.put("M1", CachedMessage(sender_id="A", chat_id="G1", content="x"))

        self.assertEqual(self.cache.remove("M1").content, "x")
        self.assertIsNone(self.cache.remove("M1"))
        self.assertIsNone(self.cache.remove("missing"))
        self.assertNotIn("M1", self.cache)

    def test_sweep_boundary(self) -> None:
        self.cache.put("old", CachedMessage(sender_id="A", chat_id="G1", content="x"))
        self.clock.advance(1)
        self.cache.put("edge", CachedMessage(sender_id="A", chat_id="G1", content="y"))
        self.clock.advance(1)
        self.cache.put("fresh", CachedMessage(sender_id="A", chat_id="G1", content="z"))

        # old: 301s, edge: 300s (== ttl 保留), fresh: 299s
        removed = self.cache.sweep(self.clock.now + 299)

        self.assertEqual(removed, 1)
        self.assertNotIn("old", self.cache)
        self.assertIn("edge", self.cache)
        self.assertIn("fresh", self.cache)

    def test_clear(self) -> None:
        for i in range(3):
            self.cache.put(f"M{i}", CachedMessage(sender_id="A", chat_id=f"C{i}", content="x"))

        self.assertEqual(self.cache.clear(), 3)
        self.assertEqual(len(self.cache), 0)


if __name__ == "__main__":
    unittest.main()
