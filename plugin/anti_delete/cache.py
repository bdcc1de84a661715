"""消息缓存（TTL）。

目标：
- 缓存最近收到的消息（文本/媒体），供删除时恢复
- 条目按写入时间过期，由周期清理（sweeper）统一淘汰
- 删除事件命中后立即移除，同一条消息最多恢复一次

所有写操作都是单次 dict 操作，sweep 与 put/remove 在 await 点交错时无需加锁。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable
import time

from .models import MediaKind


# 默认缓存有效期：5 分钟
DEFAULT_TTL = 5 * 60


@dataclass(frozen=True, slots=True)
class CachedMessage:
    """缓存条目。"""

    sender_id: str
    chat_id: str
    content: str | None = None
    media: bytes | None = None
    media_kind: MediaKind | None = None
    # 有 media 时必定有值
    mimetype: str | None = None
    file_name: str | None = None
    # 写入缓存的时间（不是原消息的发送时间）
    captured_at: float = 0.0


class MessageCache:
    """按消息 id 索引的 TTL 缓存。"""

    def __init__(self, ttl: float = DEFAULT_TTL, *, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CachedMessage] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._entries

    def put(self, message_id: str, entry: CachedMessage) -> None:
        """写入缓存（同 id 覆盖），captured_at 以当前时间为准。"""

        self._entries[message_id] = replace(entry, captured_at=self._clock())

    def get(self, message_id: str) -> CachedMessage | None:
        """读取缓存（不会刷新有效期）。"""

        return self._entries.get(message_id)

    def remove(self, message_id: str) -> CachedMessage | None:
        """移除并返回条目；不存在时什么也不做。"""

        return self._entries.pop(message_id, None)

    def sweep(self, now: float | None = None) -> int:
        """淘汰 `now - captured_at > ttl` 的条目，返回淘汰数量。"""

        if now is None:
            now = self._clock()
        expired = [mid for mid, entry in list(self._entries.items()) if now - entry.captured_at > self.ttl]
        for mid in expired:
            self._entries.pop(mid, None)
        return len(expired)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count
