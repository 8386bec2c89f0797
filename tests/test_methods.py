import io

import msgspec
import pytest

from botwire.api import InputFile, InputFileInfo, PayloadKind
from botwire.methods import (
    DeleteMessage,
    GetFile,
    GetMe,
    GetUpdates,
    MediaGroupItem,
    SendDocument,
    SendMediaGroup,
    SendMessage,
)
from botwire.types import MessageEntity


def _stream(name: str = "a.txt") -> InputFile:
    return InputFile.from_reader(io.BytesIO(b"data"), InputFileInfo(name, "text/plain"))


def test_get_me_is_empty_payload() -> None:
    payload = GetMe().into_payload()
    assert payload.kind is PayloadKind.EMPTY
    assert payload.method_name == "getMe"


def test_get_updates_omits_unset_params() -> None:
    payload = GetUpdates(offset=10, timeout=5).into_payload()
    assert payload.kind is PayloadKind.JSON
    assert payload.data == {"offset": 10, "timeout": 5}


def test_send_message_entities_replace_parse_mode() -> None:
    payload = SendMessage(
        chat_id=1,
        text="hi",
        parse_mode="HTML",
        entities=[MessageEntity(type="bold", offset=0, length=2)],
    ).into_payload()

    encoded = msgspec.json.decode(msgspec.json.encode(payload.data))
    assert "parse_mode" not in encoded
    assert encoded["entities"] == [{"type": "bold", "offset": 0, "length": 2}]


def test_send_document_by_id_uses_json() -> None:
    payload = SendDocument(
        chat_id=1, document=InputFile.file_id("file-id"), caption="c"
    ).into_payload()

    assert payload.kind is PayloadKind.JSON
    assert payload.data == {"chat_id": 1, "caption": "c", "document": "file-id"}


def test_send_document_stream_uses_form() -> None:
    payload = SendDocument(
        chat_id=1,
        document=_stream(),
        thumbnail=InputFile.file_id("thumb-id"),
        caption_entities=[MessageEntity(type="bold", offset=0, length=1)],
        parse_mode="HTML",
        disable_notification=True,
    ).into_payload()

    assert payload.kind is PayloadKind.FORM
    form = payload.form
    assert form is not None
    assert form.get("chat_id") == "1"
    assert form.get("disable_notification") == "true"
    assert form.get("parse_mode") is None
    assert msgspec.json.decode(form.get("caption_entities")) == [
        {"type": "bold", "offset": 0, "length": 1}
    ]
    assert form.get("thumbnail").text == "thumb-id"
    assert form.get("document").is_stream


def test_media_group_references_uploads_by_attach_name() -> None:
    method = SendMediaGroup(
        chat_id=1,
        media=[
            MediaGroupItem("document", _stream("a.txt"), thumbnail=_stream("t.jpg")),
            MediaGroupItem("photo", InputFile.file_id("photo-id"), caption="x"),
            MediaGroupItem("photo", InputFile.url("https://e.x/p.png"), thumbnail=_stream()),
        ],
    )
    payload = method.into_payload()

    assert payload.kind is PayloadKind.FORM
    form = payload.form
    assert form is not None
    media = msgspec.json.decode(form.get("media"))
    assert media == [
        {
            "type": "document",
            "media": "attach://botwire_im_file_0",
            "thumbnail": "attach://botwire_im_thumb_0",
        },
        {"type": "photo", "media": "photo-id", "caption": "x"},
        {"type": "photo", "media": "https://e.x/p.png"},
    ]
    assert set(form) == {
        "botwire_im_file_0",
        "botwire_im_thumb_0",
        "chat_id",
        "media",
    }


@pytest.mark.parametrize("count", [1, 11])
def test_media_group_size_is_checked(count: int) -> None:
    items = [MediaGroupItem("photo", InputFile.file_id(str(i))) for i in range(count)]
    with pytest.raises(ValueError):
        SendMediaGroup(chat_id=1, media=items)


def test_simple_json_methods() -> None:
    assert GetFile("abc").into_payload().data == {"file_id": "abc"}
    assert DeleteMessage(chat_id=1, message_id=2).into_payload().data == {
        "chat_id": 1,
        "message_id": 2,
    }
    assert DeleteMessage.response_type is bool
