"""插件运行开关（持久化到 JSON 文件）。

文件结构：{"chats": {"<chatId>": true|false}}，启动时读一次，每次切换整份写回。

生效范围（scope）：
- global：一个进程级开关，由最近一次 on/off 命令决定，对所有会话生效
- chat：每个事件都按会话查表，未出现的会话视为关闭
"""

from __future__ import annotations

from typing import Literal

from nb_shared.json_store import JsonStore


CHATS_KEY = "chats"

Scope = Literal["global", "chat"]


class ToggleState:
    def __init__(self, store: JsonStore, *, scope: Scope = "global"):
        self.store = store
        self.scope: Scope = scope
        self.enabled = False

    def _chats(self) -> dict[str, bool]:
        chats = self.store.get(CHATS_KEY)
        if not isinstance(chats, dict):
            chats = {}
            self.store.set(CHATS_KEY, chats)
        return chats

    @property
    def chats(self) -> dict[str, bool]:
        return {str(k): v is True for k, v in self._chats().items()}

    def load(self) -> None:
        """从磁盘读取；全局开关取“任一会话已开启”。"""

        self.store.reload()
        self.enabled = any(self.chats.values())

    def is_active(self, chat_id: str | None) -> bool:
        if self.scope == "chat":
            return bool(chat_id) and self._chats().get(chat_id) is True
        return self.enabled

    def set_chat(self, chat_id: str, enabled: bool) -> None:
        """更新会话开关与全局开关并立即落盘（写入失败直接抛出）。"""

        self._chats()[chat_id] = bool(enabled)
        self.enabled = bool(enabled)
        self.store.save()
