"""桥接客户端事件载荷模型。

桥接层按 Baileys 的 JSON 形态（camelCase）推送事件，这里用 pydantic 做一层校验，
业务代码只面对带类型的字段，不再按名字去探测 `xxxMessage`。
未声明的字段保留在模型里（extra="allow"），下载媒体时原样交还给桥接层。
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MediaKind(str, Enum):
    """可缓存的媒体类型。"""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    STICKER = "sticker"
    DOCUMENT = "document"
    # 按住说话的语音（audioMessage.ptt = true）
    VOICE = "voice"

    @property
    def download_type(self) -> str:
        """下载时交给桥接层的媒体类型（语音按 audio 下载）。"""

        return MediaKind.AUDIO.value if self is MediaKind.VOICE else self.value

    @property
    def send_field(self) -> str:
        """重新发送时 content 中承载数据的字段名。"""

        return MediaKind.AUDIO.value if self is MediaKind.VOICE else self.value

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def default_mimetype(self) -> str:
        return _DEFAULT_MIMETYPES[self]


_DEFAULT_MIMETYPES: dict[MediaKind, str] = {
    MediaKind.IMAGE: "image/jpeg",
    MediaKind.VIDEO: "video/mp4",
    MediaKind.AUDIO: "audio/mpeg",
    MediaKind.STICKER: "image/webp",
    MediaKind.DOCUMENT: "application/octet-stream",
    MediaKind.VOICE: "audio/ogg; codecs=opus",
}


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def dump(self) -> dict[str, Any]:
        """还原为桥接层使用的 camelCase 字典。"""

        return self.model_dump(by_alias=True, exclude_none=True)


class MessageKey(_Payload):
    remote_jid: str | None = None
    id: str
    from_me: bool = False
    # 群聊中为实际发送者
    participant: str | None = None


class ExtendedTextMessage(_Payload):
    text: str | None = None


class MediaMessage(_Payload):
    mimetype: str | None = None
    caption: str | None = None


class AudioMessage(MediaMessage):
    ptt: bool = False


class DocumentMessage(MediaMessage):
    file_name: str | None = None


class MediaPayload(NamedTuple):
    """一条媒体候选：类型 + 对应的消息体。"""

    kind: MediaKind
    message: MediaMessage


class MessageContent(_Payload):
    conversation: str | None = None
    extended_text_message: ExtendedTextMessage | None = None
    image_message: MediaMessage | None = None
    video_message: MediaMessage | None = None
    audio_message: AudioMessage | None = None
    sticker_message: MediaMessage | None = None
    document_message: DocumentMessage | None = None

    def text(self) -> str | None:
        """提取纯文本：正文 > 扩展文本 > 图片/视频/文件的说明文字。"""

        candidates = (
            self.conversation,
            self.extended_text_message.text if self.extended_text_message else None,
            self.image_message.caption if self.image_message else None,
            self.video_message.caption if self.video_message else None,
            self.document_message.caption if self.document_message else None,
        )
        for text in candidates:
            if text:
                return text
        return None

    def media_payloads(self) -> list[MediaPayload]:
        """按固定顺序列出媒体候选（image, video, audio/voice, sticker, document）。"""

        audio_kind = MediaKind.AUDIO
        if self.audio_message is not None and self.audio_message.ptt:
            audio_kind = MediaKind.VOICE

        candidates: tuple[tuple[MediaKind, MediaMessage | None], ...] = (
            (MediaKind.IMAGE, self.image_message),
            (MediaKind.VIDEO, self.video_message),
            (audio_kind, self.audio_message),
            (MediaKind.STICKER, self.sticker_message),
            (MediaKind.DOCUMENT, self.document_message),
        )
        return [MediaPayload(kind, msg) for kind, msg in candidates if msg is not None]


class WAMessage(_Payload):
    """messages.upsert 中的一条消息。"""

    key: MessageKey
    message: MessageContent | None = None
    push_name: str | None = None

    @property
    def chat_id(self) -> str:
        return self.key.remote_jid or ""

    @property
    def sender_id(self) -> str:
        return self.key.participant or self.key.remote_jid or ""


class MessageUpdateData(_Payload):
    message_stub_type: int | str | None = None
    status: int | str | None = None
    # 执行删除的一方
    participant: str | None = None


class MessageUpdate(_Payload):
    """messages.update 中的一条更新。"""

    key: MessageKey
    update: MessageUpdateData = Field(default_factory=MessageUpdateData)
