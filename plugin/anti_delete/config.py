"""插件配置读取。

这里使用 driver.config（由 NoneBot 加载 .env 等来源），并通过 pydantic 模型进行校验与默认值填充。

.env 配置项（均可省略）：
ANTIDELETE_STATUS_PATH=antidelete_status.json   # 开关状态文件
ANTIDELETE_CACHE_TTL=300                        # 缓存有效期（秒）
ANTIDELETE_SWEEP_INTERVAL=0                     # 清理周期（秒），0 表示与 TTL 相同
ANTIDELETE_TIMEZONE=Africa/Nairobi
ANTIDELETE_TIMEZONE_LABEL=EAT
ANTIDELETE_BOT_NAME="Cloud AI"
ANTIDELETE_SCOPE=global                         # global / chat
"""

from __future__ import annotations

from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nonebot import get_plugin_config
from pydantic import BaseModel, Field
from pydantic import field_validator


class Config(BaseModel):
    """防删除插件配置模型（从 .env 读取）。"""

    antidelete_status_path: str = Field(
        default="antidelete_status.json", description="各会话开关状态的持久化文件"
    )
    antidelete_cache_ttl: int = Field(default=300, description="消息缓存有效期（秒）")
    antidelete_sweep_interval: int = Field(
        default=0, description="过期清理周期（秒），0 表示与 TTL 相同"
    )
    antidelete_timezone: str = Field(default="Africa/Nairobi", description="通知中时间的时区")
    antidelete_timezone_label: str = Field(default="EAT", description="时区显示名")
    antidelete_bot_name: str = Field(default="Cloud AI", description="通知标题中的机器人名")
    antidelete_scope: Literal["global", "chat"] = Field(
        default="global",
        description="global：任一会话的开关对全部会话生效；chat：按会话单独判断",
    )

    @field_validator("antidelete_cache_ttl")
    @classmethod
    def _check_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("ANTIDELETE_CACHE_TTL 必须大于 0")
        return value

    @field_validator("antidelete_sweep_interval", mode="before")
    @classmethod
    def _coerce_interval(cls, value: Any):
        """空值/负数统一视为 0（跟随 TTL）。"""

        if value is None or value == "":
            return 0
        try:
            n = int(value)
        except (TypeError, ValueError):
            return 0
        return n if n > 0 else 0

    @field_validator("antidelete_scope", mode="before")
    @classmethod
    def _normalize_scope(cls, value: Any):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("antidelete_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"未知时区: {value}") from exc
        return value

    @property
    def sweep_interval(self) -> int:
        return self.antidelete_sweep_interval or self.antidelete_cache_ttl

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.antidelete_timezone)


plugin_config: Config = get_plugin_config(Config)
