"""收到消息时写入缓存。

- 文本：正文 > 扩展文本 > 图片/视频/文件的说明
- 媒体：按 image, video, audio(voice), sticker, document 顺序尝试下载，第一个成功的为准
- 下载失败换下一个候选；单条消息失败不影响同一批次的其他消息
"""

from __future__ import annotations

from typing import Iterable

from nonebot import logger

from .cache import CachedMessage, MessageCache
from .client import WhatsAppClient
from .constants import STATUS_BROADCAST_JID
from .hooks import STAGE_CAPTURE, STAGE_DOWNLOAD, FailureHook, log_failure
from .models import DocumentMessage, MediaPayload, WAMessage
from .state import ToggleState


def should_capture(msg: WAMessage) -> bool:
    """自己发的、没有内容的、状态广播都不缓存。"""

    if msg.key.from_me or msg.message is None:
        return False
    return msg.chat_id != STATUS_BROADCAST_JID


async def download(client: WhatsAppClient, payload: MediaPayload) -> bytes:
    """把下载流拼成一个 buffer。"""

    buffer = bytearray()
    async for chunk in client.download_media(payload.message.dump(), payload.kind.download_type):
        buffer.extend(chunk)
    return bytes(buffer)


async def build_entry(
    client: WhatsAppClient,
    msg: WAMessage,
    *,
    on_failure: FailureHook = log_failure,
) -> CachedMessage | None:
    """提取文本与媒体；两者都没有时返回 None。"""

    if msg.message is None:
        return None
    content = msg.message.text()

    for payload in msg.message.media_payloads():
        try:
            data = await download(client, payload)
        except Exception as exc:
            on_failure(STAGE_DOWNLOAD, exc, msg.key.id)
            continue

        file_name = payload.message.file_name if isinstance(payload.message, DocumentMessage) else None
        return CachedMessage(
            sender_id=msg.sender_id,
            chat_id=msg.chat_id,
            content=content,
            media=data,
            media_kind=payload.kind,
            mimetype=payload.message.mimetype or payload.kind.default_mimetype,
            file_name=file_name,
        )

    if not content:
        return None
    return CachedMessage(sender_id=msg.sender_id, chat_id=msg.chat_id, content=content)


async def capture_messages(
    client: WhatsAppClient,
    messages: Iterable[WAMessage],
    *,
    cache: MessageCache,
    state: ToggleState,
    on_failure: FailureHook = log_failure,
) -> int:
    """处理一批消息，返回写入缓存的条数。"""

    captured = 0
    for msg in messages:
        if not should_capture(msg):
            continue
        if not state.is_active(msg.chat_id):
            continue

        try:
            entry = await build_entry(client, msg, on_failure=on_failure)
        except Exception as exc:
            on_failure(STAGE_CAPTURE, exc, msg.key.id)
            continue

        if entry is None:
            continue
        cache.put(msg.key.id, entry)
        captured += 1
        logger.debug(
            f"防删除：已缓存 {msg.key.id} ({entry.media_kind.value if entry.media_kind else 'text'})"
        )
    return captured
