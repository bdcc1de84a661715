"""失败回调。

批处理中单条失败只影响这一条；失败不直接吞掉，而是交给可注入的回调：
- 默认回调写日志
- 测试或监控可以换成计数器
"""

from __future__ import annotations

from collections import Counter
from typing import Callable

from nonebot import logger


# (stage, exc, message_id)
FailureHook = Callable[[str, BaseException, str | None], None]

STAGE_PARSE = "parse"
STAGE_DOWNLOAD = "download"
STAGE_CAPTURE = "capture"
STAGE_COMMAND = "command"
STAGE_CHAT_INFO = "chat_info"
STAGE_RECOVERY = "recovery"
STAGE_SWEEP = "sweep"


def log_failure(stage: str, exc: BaseException, message_id: str | None) -> None:
    logger.opt(exception=exc).warning(f"防删除：{stage} 失败 (message_id={message_id})")


class FailureCounter:
    """按阶段计数的失败回调，可选地继续转发给下一个回调。"""

    def __init__(self, forward: FailureHook | None = None):
        self.counts: Counter[str] = Counter()
        self.errors: list[tuple[str, BaseException, str | None]] = []
        self._forward = forward

    def __call__(self, stage: str, exc: BaseException, message_id: str | None) -> None:
        self.counts[stage] += 1
        self.errors.append((stage, exc, message_id))
        if self._forward is not None:
            self._forward(stage, exc, message_id)

    def total(self) -> int:
        return sum(self.counts.values())
