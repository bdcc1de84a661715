"""事件监听与业务编排。

把“监听/编排”与“纯函数工具”分离，便于维护与单测。

- messages.upsert：先处理开关命令，再缓存其余消息
- messages.update：识别删除并恢复
- 过期清理任务随 NoneBot driver 的 startup/shutdown 启停
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar
import time

from nonebot import get_driver, logger
from pydantic import BaseModel, ValidationError

from nb_shared.json_store import get_store

from .cache import MessageCache
from .capture import capture_messages
from .client import Listener, WhatsAppClient
from .commands import handle_toggle
from .config import Config, plugin_config
from .constants import EVENT_MESSAGES_UPDATE, EVENT_MESSAGES_UPSERT, STATUS_BROADCAST_JID
from .exceptions import ClientNotBoundError
from .hooks import STAGE_COMMAND, STAGE_PARSE, FailureHook, log_failure
from .models import MessageUpdate, WAMessage
from .recovery import NoticeStyle, recover_messages
from .state import ToggleState
from .sweeper import CacheSweeper


ModelT = TypeVar("ModelT", bound=BaseModel)


def _guess_message_id(item: Any) -> str | None:
    if isinstance(item, dict) and isinstance(item.get("key"), dict):
        mid = item["key"].get("id")
        return str(mid) if mid is not None else None
    return None


class AntiDelete:
    """插件运行时：持有缓存、开关状态、清理任务与桥接客户端。"""

    def __init__(
        self,
        *,
        cache: MessageCache,
        state: ToggleState,
        style: NoticeStyle,
        sweep_interval: float,
        on_failure: FailureHook = log_failure,
        clock: Callable[[], float] = time.time,
    ):
        self.cache = cache
        self.state = state
        self.style = style
        self.on_failure = on_failure
        self.sweeper = CacheSweeper(cache, sweep_interval, on_failure=on_failure)
        self._clock = clock
        self._client: WhatsAppClient | None = None
        self._listeners: list[tuple[str, Listener]] = []

    @classmethod
    def from_config(cls, config: Config) -> AntiDelete:
        return cls(
            cache=MessageCache(config.antidelete_cache_ttl),
            state=ToggleState(get_store(config.antidelete_status_path), scope=config.antidelete_scope),
            style=NoticeStyle(
                bot_name=config.antidelete_bot_name,
                tz=config.tzinfo,
                tz_label=config.antidelete_timezone_label,
            ),
            sweep_interval=config.sweep_interval,
        )

    @property
    def client(self) -> WhatsAppClient:
        if self._client is None:
            raise ClientNotBoundError("尚未绑定 WhatsApp 桥接客户端")
        return self._client

    @property
    def bound(self) -> bool:
        return self._client is not None

    def bind(self, client: WhatsAppClient) -> None:
        """订阅桥接客户端的事件（重复绑定同一客户端无副作用）。"""

        if self._client is client:
            return
        self.unbind()

        self._client = client
        self._listeners = [
            (EVENT_MESSAGES_UPSERT, self.on_upsert),
            (EVENT_MESSAGES_UPDATE, self.on_update),
        ]
        for event, listener in self._listeners:
            client.ev.on(event, listener)
        logger.info("防删除：已绑定桥接客户端")

    def unbind(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        for event, listener in self._listeners:
            client.ev.off(event, listener)
        self._listeners = []
        logger.info("防删除：已解绑桥接客户端")

    async def start(self) -> None:
        self.state.load()
        self.sweeper.start()
        logger.info(
            f"防删除：启动，开关={'开启' if self.state.enabled else '关闭'}，"
            f"范围={self.state.scope}，TTL={self.cache.ttl}s"
        )

    async def stop(self) -> None:
        await self.sweeper.stop()
        self.unbind()

    def _parse(self, items: Iterable[Any], model: type[ModelT]) -> list[ModelT]:
        """逐条校验，单条格式错误只跳过这一条。"""

        parsed: list[ModelT] = []
        for item in items:
            try:
                parsed.append(model.model_validate(item))
            except ValidationError as exc:
                self.on_failure(STAGE_PARSE, exc, _guess_message_id(item))
        return parsed

    async def on_upsert(self, payload: Any) -> None:
        """messages.upsert：{"messages": [...], "type": "notify"} 或直接是列表。"""

        raw = payload.get("messages") if isinstance(payload, dict) else payload
        if not raw:
            return

        client = self.client
        pending: list[WAMessage] = []
        for msg in self._parse(raw, WAMessage):
            if msg.chat_id == STATUS_BROADCAST_JID:
                continue
            try:
                if await handle_toggle(
                    client, msg, state=self.state, cache=self.cache, bot_name=self.style.bot_name
                ):
                    continue
            except Exception as exc:
                # 命令失败（写盘/回复）只影响这一条，同批其他消息照常缓存
                self.on_failure(STAGE_COMMAND, exc, msg.key.id)
                continue
            pending.append(msg)

        if pending:
            await capture_messages(
                client, pending, cache=self.cache, state=self.state, on_failure=self.on_failure
            )

    async def on_update(self, updates: Any) -> None:
        if not updates:
            return

        await recover_messages(
            self.client,
            self._parse(updates, MessageUpdate),
            cache=self.cache,
            state=self.state,
            style=self.style,
            on_failure=self.on_failure,
            clock=self._clock,
        )


driver = get_driver()
anti_delete = AntiDelete.from_config(plugin_config)


@driver.on_startup
async def _start_anti_delete() -> None:
    await anti_delete.start()


@driver.on_shutdown
async def _stop_anti_delete() -> None:
    await anti_delete.stop()


def bind_client(client: WhatsAppClient) -> None:
    """桥接层连上 WhatsApp 后调用。"""

    anti_delete.bind(client)


def unbind_client() -> None:
    anti_delete.unbind()
