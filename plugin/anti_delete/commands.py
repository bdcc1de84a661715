"""开关命令：antidelete on / antidelete off

用法：
- antidelete on     # 开启
- antidelete off    # 关闭（同时清空全部缓存，不只是当前会话）

说明：
- 整句匹配，忽略大小写与首尾空白；其他写法一律不处理
- 不做权限判断，任何人（包括机器人账号自己）都可以切换
- 回复固定文案并对命令消息点一个 ✅
"""

from __future__ import annotations

from nonebot import logger

from .cache import MessageCache
from .client import WhatsAppClient
from .constants import TOGGLE_OFF, TOGGLE_ON, TOGGLE_REACTION
from .models import WAMessage
from .state import ToggleState


def parse_toggle(text: str | None) -> bool | None:
    """命中开关命令时返回目标状态，否则返回 None。"""

    if not text:
        return None
    cmd = text.strip().lower()
    if cmd == TOGGLE_ON:
        return True
    if cmd == TOGGLE_OFF:
        return False
    return None


def reply_text(enabled: bool, *, bot_name: str, scope: str) -> str:
    if enabled:
        scope_label = "This Chat" if scope == "chat" else "All Chats"
        return (
            f"🛡️ *ANTI-DELETE ENABLED* - {bot_name}\n\n"
            f"Scope: {scope_label}\n"
            "Mode: Same Chat\n\n"
            "✅ Deleted messages will now be restored here!"
        )
    return (
        f"⚠️ *ANTI-DELETE DISABLED* - {bot_name}\n\n"
        "Deleted messages will no longer be recovered."
    )


def command_text(msg: WAMessage) -> str | None:
    """命令只看纯文本正文（不看图片说明）。"""

    if msg.message is None:
        return None
    if msg.message.conversation:
        return msg.message.conversation
    if msg.message.extended_text_message is not None:
        return msg.message.extended_text_message.text
    return None


async def handle_toggle(
    client: WhatsAppClient,
    msg: WAMessage,
    *,
    state: ToggleState,
    cache: MessageCache,
    bot_name: str,
) -> bool:
    """处理开关命令；不是命令时返回 False。

    状态写盘失败时异常直接抛出，不回复。
    """

    enabled = parse_toggle(command_text(msg))
    if enabled is None:
        return False

    chat_id = msg.chat_id
    state.set_chat(chat_id, enabled)
    if not enabled:
        dropped = cache.clear()
        logger.info(f"防删除：已关闭（{chat_id}），清空缓存 {dropped} 条")
    else:
        logger.info(f"防删除：已开启（{chat_id}）")

    quoted = msg.dump()
    await client.send_message(
        chat_id, {"text": reply_text(enabled, bot_name=bot_name, scope=state.scope)}, quoted=quoted
    )
    await client.send_message(chat_id, {"react": {"text": TOGGLE_REACTION, "key": msg.key.dump()}})
    return True
