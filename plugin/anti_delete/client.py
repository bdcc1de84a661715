"""桥接客户端接口（外部协作方）。

WhatsApp 的连接、会话、媒体下载与消息发送都由桥接层负责，本插件只依赖下面这组能力。
桥接层连上之后调用 `bind_client(client)` 把自己交给插件。

content 字典沿用 Baileys sendMessage 的写法，例如：
- {"text": "..."}
- {"image": b"...", "caption": "...", "mimetype": "image/jpeg"}
- {"audio": b"...", "mimetype": "...", "ptt": True}
- {"react": {"text": "✅", "key": {...}}}
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Awaitable, Callable, Protocol


Listener = Callable[[Any], Awaitable[None]]


class EventEmitter(Protocol):
    def on(self, event: str, listener: Listener) -> None: ...

    def off(self, event: str, listener: Listener) -> None: ...


class WhatsAppClient(Protocol):
    ev: EventEmitter

    async def group_metadata(self, jid: str) -> dict[str, Any]:
        """获取群信息（至少包含 subject），失败时抛异常。"""
        ...

    def download_media(self, message: dict[str, Any], media_type: str) -> AsyncIterator[bytes]:
        """下载媒体，按块产出字节。"""
        ...

    async def send_message(
        self, jid: str, content: dict[str, Any], *, quoted: dict[str, Any] | None = None
    ) -> Any: ...
