from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ..errors import FormError
from .input_file import InputFile

type FormValue = str | InputFile
type PartValue = tuple[str | None, Any] | tuple[str | None, Any, str]

ATTACH_PREFIX = "attach://"

_MIME_TOKEN = r"[A-Za-z0-9][A-Za-z0-9!#$&^_.+-]{0,126}"
_MIME_RE = re.compile(rf"^{_MIME_TOKEN}/{_MIME_TOKEN}(\s*;\s*[^;]+)*$")


def media_field_name(kind: str, index: int) -> str:
    return f"botwire_im_{kind}_{index}"


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _validate_mime(mime_type: str) -> str:
    cleaned = mime_type.strip()
    if not _MIME_RE.match(cleaned):
        raise FormError(f"can not set MIME type: {mime_type!r}")
    return cleaned


@dataclass(slots=True)
class MultipartBody:
    parts: list[tuple[str, PartValue]]
    streams: list[InputFile] = field(default_factory=list)

    @property
    def has_streams(self) -> bool:
        return bool(self.streams)


@dataclass(slots=True)
class Form:
    """Named multipart fields; inserting an existing name replaces its value."""

    fields: dict[str, FormValue] = field(default_factory=dict)

    @classmethod
    def from_fields(cls, fields: Iterable[tuple[str, Any]]) -> Form:
        form = cls()
        for name, value in fields:
            form.insert(name, value)
        return form

    def insert(self, name: str, value: Any) -> None:
        if isinstance(value, InputFile):
            self.fields[name] = value
        else:
            self.fields[name] = _to_text(value)

    def remove(self, name: str) -> None:
        self.fields.pop(name, None)

    def get(self, name: str) -> FormValue | None:
        return self.fields.get(name)

    def attach(self, name: str, file: InputFile) -> str:
        """Return the value a JSON field should use to reference ``file``.

        References by id or URL are returned as-is; streams are stored under
        ``name`` and referenced as ``attach://<name>``.
        """
        if not file.is_stream:
            return file.text
        self.fields[name] = file
        return f"{ATTACH_PREFIX}{name}"

    @property
    def has_streams(self) -> bool:
        return any(
            isinstance(value, InputFile) and value.is_stream
            for value in self.fields.values()
        )

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def into_multipart(self) -> MultipartBody:
        parts: list[tuple[str, PartValue]] = []
        streams: list[InputFile] = []
        fields, self.fields = self.fields, {}
        try:
            for name, value in fields.items():
                if isinstance(value, InputFile) and value.is_stream:
                    parts.append((name, _stream_part(value)))
                    streams.append(value)
                elif isinstance(value, InputFile):
                    parts.append((name, (None, value.text.encode())))
                else:
                    parts.append((name, (None, value.encode())))
        except FormError:
            for value in fields.values():
                if isinstance(value, InputFile):
                    value.close()
            raise
        return MultipartBody(parts=parts, streams=streams)


def _stream_part(file: InputFile) -> PartValue:
    info = file.info
    if info is None:
        return (None, file.reader)
    if info.mime_type is None:
        return (info.name, file.reader)
    return (info.name, file.reader, _validate_mime(info.mime_type))
