"""
防删除插件
缓存收到的 WhatsApp 消息，发送者“为所有人删除”后把原内容发回原会话

接入说明:
WhatsApp 连接由外部桥接层负责，连接建立后调用（经 require 取到已加载的插件模块，避免重复导入）:
    from nonebot import require
    require("anti_delete").bind_client(client)

配置说明（.env，均可省略）:
ANTIDELETE_STATUS_PATH=antidelete_status.json
ANTIDELETE_CACHE_TTL=300
ANTIDELETE_SCOPE=global
"""
from nonebot.plugin import PluginMetadata


__plugin_meta__ = PluginMetadata(
    name="防删除插件",
    description="缓存 WhatsApp 消息，被删除时在原会话中恢复文本/媒体/语音",
    usage="发送 antidelete on / antidelete off 切换",
    extra={"author": "Lystran"},
)

# 导入 handlers 模块以注册启动/关闭钩子
from .handlers import anti_delete, bind_client, unbind_client  # noqa: E402

__all__ = ["anti_delete", "bind_client", "unbind_client"]
