"""Msgspec models for the Bot API results returned by :mod:`botwire.methods`.

Only the fields the bundled methods need are declared; unknown fields are
ignored on decode.
"""

from __future__ import annotations

import msgspec

__all__ = [
    "Chat",
    "Document",
    "File",
    "Message",
    "MessageEntity",
    "PhotoSize",
    "Update",
    "User",
]


class User(msgspec.Struct, forbid_unknown_fields=False):
    id: int
    is_bot: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


class Chat(msgspec.Struct, forbid_unknown_fields=False):
    id: int
    type: str
    title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    is_forum: bool | None = None


class MessageEntity(msgspec.Struct, forbid_unknown_fields=False, omit_defaults=True):
    type: str
    offset: int
    length: int
    url: str | None = None


class PhotoSize(msgspec.Struct, forbid_unknown_fields=False):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None


class Document(msgspec.Struct, forbid_unknown_fields=False):
    file_id: str
    file_unique_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None
    thumbnail: PhotoSize | None = None


class Message(msgspec.Struct, forbid_unknown_fields=False):
    message_id: int
    date: int
    chat: Chat
    message_thread_id: int | None = None
    from_: User | None = msgspec.field(default=None, name="from")
    text: str | None = None
    caption: str | None = None
    entities: list[MessageEntity] | None = None
    media_group_id: str | None = None
    document: Document | None = None
    photo: list[PhotoSize] | None = None


class Update(msgspec.Struct, forbid_unknown_fields=False):
    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    channel_post: Message | None = None


class File(msgspec.Struct, forbid_unknown_fields=False):
    """A file ready to be downloaded with ``Client.download_file(file_path)``."""

    file_id: str
    file_unique_id: str
    file_size: int | None = None
    file_path: str | None = None
