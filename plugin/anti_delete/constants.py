"""常量定义。

本文件只放不会引入循环依赖的常量，便于其他模块复用。
"""

# 桥接客户端（Baileys 风格）的事件名
EVENT_MESSAGES_UPSERT = "messages.upsert"
EVENT_MESSAGES_UPDATE = "messages.update"

# 状态广播频道，不缓存
STATUS_BROADCAST_JID = "status@broadcast"

USER_JID_SUFFIX = "@s.whatsapp.net"
GROUP_JID_SUFFIX = "@g.us"

# proto.WebMessageInfo.StubType.REVOKE
REVOKE_STUB_TYPE = 1
DELETED_STATUS = "DELETED"

TOGGLE_ON = "antidelete on"
TOGGLE_OFF = "antidelete off"
TOGGLE_REACTION = "✅"

UNKNOWN = "Unknown"
UNKNOWN_CHAT = "Unknown Chat"
UNKNOWN_GROUP = "Unknown Group"
PRIVATE_CHAT = "Private Chat"
