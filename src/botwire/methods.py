"""Bot API methods bundled with botwire.

Each method is a plain dataclass implementing :class:`botwire.api.Method`.
Methods taking files pick a JSON body when every file is referenced by id
or URL, and a multipart body as soon as one of them is a local stream.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Literal

import msgspec

from .api import Form, InputFile, Payload, media_field_name
from .types import File, Message, MessageEntity, Update, User

type ChatId = int | str

MIN_GROUP_ATTACHMENTS = 2
MAX_GROUP_ATTACHMENTS = 10


def _drop_none(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def _form_text(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    return msgspec.json.encode(value).decode()


def _payload_with_files(
    method_name: str,
    params: Mapping[str, Any],
    files: Mapping[str, InputFile | None],
) -> Payload:
    attached = {name: file for name, file in files.items() if file is not None}
    if not any(file.is_stream for file in attached.values()):
        data = _drop_none(params)
        data.update({name: file.text for name, file in attached.items()})
        return Payload.json(method_name, data)

    form = Form()
    for name, value in _drop_none(params).items():
        form.insert(name, _form_text(value))
    for name, file in attached.items():
        form.insert(name, file)
    return Payload.from_form(method_name, form)


@dataclass(slots=True)
class GetMe:
    response_type: ClassVar[Any] = User

    def into_payload(self) -> Payload:
        return Payload.empty("getMe")


@dataclass(slots=True)
class GetUpdates:
    response_type: ClassVar[Any] = list[Update]

    offset: int | None = None
    limit: int | None = None
    timeout: int | None = None
    allowed_updates: list[str] | None = None

    def into_payload(self) -> Payload:
        return Payload.json(
            "getUpdates",
            _drop_none(
                {
                    "offset": self.offset,
                    "limit": self.limit,
                    "timeout": self.timeout,
                    "allowed_updates": self.allowed_updates,
                }
            ),
        )


@dataclass(slots=True)
class GetFile:
    response_type: ClassVar[Any] = File

    file_id: str

    def into_payload(self) -> Payload:
        return Payload.json("getFile", {"file_id": self.file_id})


@dataclass(slots=True)
class SendMessage:
    response_type: ClassVar[Any] = Message

    chat_id: ChatId
    text: str
    parse_mode: str | None = None
    entities: list[MessageEntity] | None = None
    reply_to_message_id: int | None = None
    message_thread_id: int | None = None
    disable_notification: bool | None = None
    reply_markup: dict[str, Any] | None = None

    def into_payload(self) -> Payload:
        return Payload.json(
            "sendMessage",
            _drop_none(
                {
                    "chat_id": self.chat_id,
                    "text": self.text,
                    # entities take precedence over a parse mode
                    "parse_mode": None if self.entities else self.parse_mode,
                    "entities": self.entities,
                    "reply_to_message_id": self.reply_to_message_id,
                    "message_thread_id": self.message_thread_id,
                    "disable_notification": self.disable_notification,
                    "reply_markup": self.reply_markup,
                }
            ),
        )


@dataclass(slots=True)
class SendDocument:
    response_type: ClassVar[Any] = Message

    chat_id: ChatId
    document: InputFile
    thumbnail: InputFile | None = None
    caption: str | None = None
    parse_mode: str | None = None
    caption_entities: list[MessageEntity] | None = None
    disable_content_type_detection: bool | None = None
    reply_to_message_id: int | None = None
    message_thread_id: int | None = None
    disable_notification: bool | None = None

    def into_payload(self) -> Payload:
        params = {
            "chat_id": self.chat_id,
            "caption": self.caption,
            "parse_mode": None if self.caption_entities else self.parse_mode,
            "caption_entities": self.caption_entities,
            "disable_content_type_detection": self.disable_content_type_detection,
            "reply_to_message_id": self.reply_to_message_id,
            "message_thread_id": self.message_thread_id,
            "disable_notification": self.disable_notification,
        }
        return _payload_with_files(
            "sendDocument",
            params,
            {"document": self.document, "thumbnail": self.thumbnail},
        )


@dataclass(slots=True)
class MediaGroupItem:
    type: Literal["audio", "document", "photo", "video"]
    file: InputFile
    thumbnail: InputFile | None = None
    caption: str | None = None
    parse_mode: str | None = None


@dataclass(slots=True)
class SendMediaGroup:
    """Send 2-10 items as an album.

    Items are described by a JSON ``media`` field; uploaded streams are
    referenced from it as ``attach://botwire_im_file_<index>``.
    """

    response_type: ClassVar[Any] = list[Message]

    chat_id: ChatId
    media: Sequence[MediaGroupItem]
    reply_to_message_id: int | None = None
    message_thread_id: int | None = None
    disable_notification: bool | None = None

    def __post_init__(self) -> None:
        total = len(self.media)
        if total < MIN_GROUP_ATTACHMENTS:
            raise ValueError(
                f"media group requires at least {MIN_GROUP_ATTACHMENTS} items"
            )
        if total > MAX_GROUP_ATTACHMENTS:
            raise ValueError(
                f"media group accepts at most {MAX_GROUP_ATTACHMENTS} items"
            )

    def into_payload(self) -> Payload:
        form = Form()
        described: list[dict[str, Any]] = []
        for index, item in enumerate(self.media):
            entry: dict[str, Any] = {
                "type": item.type,
                "media": form.attach(media_field_name("file", index), item.file),
            }
            # photos have no thumbnail
            if item.thumbnail is not None and item.type != "photo":
                entry["thumbnail"] = form.attach(
                    media_field_name("thumb", index), item.thumbnail
                )
            entry.update(
                _drop_none({"caption": item.caption, "parse_mode": item.parse_mode})
            )
            described.append(entry)

        params = _drop_none(
            {
                "chat_id": self.chat_id,
                "reply_to_message_id": self.reply_to_message_id,
                "message_thread_id": self.message_thread_id,
                "disable_notification": self.disable_notification,
            }
        )
        for name, value in params.items():
            form.insert(name, _form_text(value))
        form.insert("media", msgspec.json.encode(described).decode())
        return Payload.from_form("sendMediaGroup", form)


@dataclass(slots=True)
class DeleteMessage:
    response_type: ClassVar[Any] = bool

    chat_id: ChatId
    message_id: int

    def into_payload(self) -> Payload:
        return Payload.json(
            "deleteMessage",
            {"chat_id": self.chat_id, "message_id": self.message_id},
        )
