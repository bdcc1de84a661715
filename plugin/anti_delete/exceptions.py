"""防删除插件自定义异常。"""

from __future__ import annotations


class AntiDeleteError(Exception):
    """防删除插件基础异常。"""


class ClientNotBoundError(AntiDeleteError):
    """桥接客户端尚未绑定（bind_client 之前收到了需要发送消息的操作）。"""
