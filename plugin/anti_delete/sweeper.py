"""缓存周期清理。

清理任务由宿主的启动/关闭流程显式开启与取消（driver.on_startup / on_shutdown），
不在构造时偷偷起定时器。
"""

from __future__ import annotations

import asyncio

from nonebot import logger

from .cache import MessageCache
from .hooks import STAGE_SWEEP, FailureHook, log_failure


class CacheSweeper:
    """每隔 interval 秒调用一次 cache.sweep()。"""

    def __init__(
        self,
        cache: MessageCache,
        interval: float,
        *,
        on_failure: FailureHook = log_failure,
    ):
        self.cache = cache
        self.interval = interval
        self._on_failure = on_failure
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                removed = self.cache.sweep()
            except Exception as exc:
                self._on_failure(STAGE_SWEEP, exc, None)
                continue
            if removed:
                logger.debug(f"防删除：清理过期缓存 {removed} 条，剩余 {len(self.cache)} 条")

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
