"""通用工具函数。

尽量保持无副作用，避免在这里做 I/O 或读取配置。
"""

from __future__ import annotations

from datetime import datetime, tzinfo

from .constants import GROUP_JID_SUFFIX, UNKNOWN, USER_JID_SUFFIX


def format_jid(jid: str | None) -> str:
    """去掉 jid 的域名后缀，只保留号码/群号。"""

    if not jid:
        return UNKNOWN
    return jid.replace(USER_JID_SUFFIX, "").replace(GROUP_JID_SUFFIX, "")


def mention(jid: str | None) -> str:
    return f"@{format_jid(jid)}"


def is_group_jid(jid: str | None) -> bool:
    return bool(jid) and GROUP_JID_SUFFIX in jid


def format_time(timestamp: float, tz: tzinfo, label: str) -> str:
    """例：Oct 19, 2026, 08:15:02 AM (EAT)"""

    dt = datetime.fromtimestamp(timestamp, tz)
    return f"{dt.strftime('%b %d, %Y, %I:%M:%S %p')} ({label})"
