"""删除事件处理：命中缓存后把原内容重新发回原会话。

流程：
1. 判断是否为删除（REVOKE 占位类型或 DELETED 状态）
2. 命中缓存立即移除（同一条消息最多恢复一次）
3. 查询会话名称（失败时用占位名）
4. 媒体：同类型重发并把通知放在说明里；文本：通知 + 原文
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, Callable, Iterable, NamedTuple
import time

from nonebot import logger

from .cache import CachedMessage, MessageCache
from .client import WhatsAppClient
from .constants import (
    DELETED_STATUS,
    PRIVATE_CHAT,
    REVOKE_STUB_TYPE,
    UNKNOWN,
    UNKNOWN_CHAT,
    UNKNOWN_GROUP,
)
from .hooks import STAGE_CHAT_INFO, STAGE_RECOVERY, FailureHook, log_failure
from .models import MediaKind, MessageUpdate, MessageUpdateData
from .state import ToggleState
from .utils import format_time, is_group_jid, mention


class ChatInfo(NamedTuple):
    name: str
    is_group: bool


@dataclass(frozen=True, slots=True)
class NoticeStyle:
    """通知文本的展示参数。"""

    bot_name: str
    tz: tzinfo
    tz_label: str


def is_deletion(update: MessageUpdateData) -> bool:
    stub = update.message_stub_type
    if stub is not None and str(stub).strip().upper() in {str(REVOKE_STUB_TYPE), "REVOKE"}:
        return True
    return isinstance(update.status, str) and update.status.upper() == DELETED_STATUS


def deleted_by(update: MessageUpdate) -> str | None:
    """执行删除的一方：update.participant > key.participant。"""

    return update.update.participant or update.key.participant


async def resolve_chat_info(
    client: WhatsAppClient,
    jid: str | None,
    *,
    on_failure: FailureHook = log_failure,
    message_id: str | None = None,
) -> ChatInfo:
    if not jid:
        return ChatInfo(UNKNOWN_CHAT, False)
    if not is_group_jid(jid):
        return ChatInfo(PRIVATE_CHAT, False)

    try:
        metadata = await client.group_metadata(jid)
    except Exception as exc:
        on_failure(STAGE_CHAT_INFO, exc, message_id)
        return ChatInfo(UNKNOWN_GROUP, True)

    subject = metadata.get("subject") if isinstance(metadata, dict) else None
    return ChatInfo(str(subject) if subject else UNKNOWN_GROUP, True)


def compose_notice(
    entry: CachedMessage,
    *,
    deleter: str | None,
    chat: ChatInfo,
    style: NoticeStyle,
    now: float,
) -> str:
    kind = entry.media_kind.label if entry.media_kind else "Text"
    return (
        f"🚨 *{style.bot_name}: Recovered Deleted {kind}*\n\n"
        f"📌 *Sender:* {mention(entry.sender_id)}\n"
        f"✂️ *Deleted By:* {mention(deleter) if deleter else UNKNOWN}\n"
        f"📍 *Chat:* {chat.name}{' (Group)' if chat.is_group else ''}\n"
        f"🕒 *Sent At:* {format_time(entry.captured_at, style.tz, style.tz_label)}\n"
        f"⏱️ *Deleted At:* {format_time(now, style.tz, style.tz_label)}"
    )


def build_content(entry: CachedMessage, notice: str, *, mentions: list[str]) -> dict[str, Any] | None:
    """构造重发内容；既无媒体也无文本时返回 None。"""

    content: dict[str, Any]
    if entry.media is not None and entry.media_kind is not None:
        content = {
            entry.media_kind.send_field: entry.media,
            "mimetype": entry.mimetype or entry.media_kind.default_mimetype,
            "caption": notice,
        }
        if entry.media_kind is MediaKind.VOICE:
            content["ptt"] = True
        if entry.media_kind is MediaKind.DOCUMENT and entry.file_name:
            content["fileName"] = entry.file_name
    elif entry.content:
        content = {"text": f"{notice}\n\n💬 *Content:* \n{entry.content}"}
    else:
        return None

    if mentions:
        content["mentions"] = mentions
    return content


async def recover_one(
    client: WhatsAppClient,
    update: MessageUpdate,
    entry: CachedMessage,
    *,
    style: NoticeStyle,
    on_failure: FailureHook = log_failure,
    clock: Callable[[], float] = time.time,
) -> bool:
    """发送一条恢复通知，返回是否真的发出了消息。"""

    deleter = deleted_by(update)
    chat = await resolve_chat_info(
        client, entry.chat_id, on_failure=on_failure, message_id=update.key.id
    )
    notice = compose_notice(entry, deleter=deleter, chat=chat, style=style, now=clock())

    mentions = [jid for jid in dict.fromkeys((entry.sender_id, deleter)) if jid and "@" in jid]
    content = build_content(entry, notice, mentions=mentions)
    if content is None:
        return False

    await client.send_message(entry.chat_id, content)
    return True


async def recover_messages(
    client: WhatsAppClient,
    updates: Iterable[MessageUpdate],
    *,
    cache: MessageCache,
    state: ToggleState,
    style: NoticeStyle,
    on_failure: FailureHook = log_failure,
    clock: Callable[[], float] = time.time,
) -> int:
    """处理一批 messages.update，返回发出的恢复消息数。"""

    sent = 0
    for update in updates:
        try:
            if not is_deletion(update.update) or update.key.from_me:
                continue
            if update.key.id not in cache:
                continue
            if not state.is_active(update.key.remote_jid):
                continue

            entry = cache.remove(update.key.id)
            if entry is None:
                continue

            if await recover_one(
                client, update, entry, style=style, on_failure=on_failure, clock=clock
            ):
                sent += 1
                logger.info(f"防删除：已恢复 {update.key.id} 到 {entry.chat_id}")
        except Exception as exc:
            on_failure(STAGE_RECOVERY, exc, update.key.id)
            continue
    return sent
