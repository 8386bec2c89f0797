from __future__ import annotations

import mimetypes
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Protocol, cast

DEFAULT_MIME_TYPE = "application/octet-stream"


class BinaryReader(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...


class InputFileKind(Enum):
    ID = "id"
    URL = "url"
    STREAM = "stream"


@dataclass(frozen=True, slots=True)
class InputFileInfo:
    name: str
    mime_type: str | None = None

    def with_mime_type(self, mime_type: str) -> InputFileInfo:
        return replace(self, mime_type=mime_type)


@dataclass(slots=True, eq=False)
class InputFile:
    """A file to send: an existing ``file_id``, a URL, or a stream to upload.

    Streams are read once while the request body is sent and are never
    rewound, so a request carrying one can not be repeated. Files opened by
    :meth:`path` are owned by the attachment and closed by :meth:`close`,
    which ``Client.execute`` calls once the request is done.
    """

    kind: InputFileKind
    value: str | None = None
    reader: BinaryReader | None = None
    info: InputFileInfo | None = None
    owns_reader: bool = False

    @classmethod
    def file_id(cls, file_id: str) -> InputFile:
        return cls(InputFileKind.ID, value=file_id)

    @classmethod
    def url(cls, url: str) -> InputFile:
        return cls(InputFileKind.URL, value=url)

    @classmethod
    def from_reader(
        cls,
        reader: BinaryReader,
        info: InputFileInfo | str | None = None,
    ) -> InputFile:
        """Upload the bytes returned by ``reader.read()``.

        The reader stays owned by the caller and is left open. httpx reads it
        synchronously while the body is sent, so a slow reader blocks the
        event loop for the duration of the upload.
        """
        if isinstance(info, str):
            info = InputFileInfo(info)
        return cls(InputFileKind.STREAM, reader=reader, info=info)

    @classmethod
    def path(cls, path: str | Path) -> InputFile:
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        info = InputFileInfo(path.name, mime_type or DEFAULT_MIME_TYPE)
        reader = path.open("rb")
        return cls(InputFileKind.STREAM, reader=reader, info=info, owns_reader=True)

    def close(self) -> None:
        if self.owns_reader and self.reader is not None:
            cast(BinaryIO, self.reader).close()

    def __enter__(self) -> InputFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_stream(self) -> bool:
        return self.kind is InputFileKind.STREAM

    @property
    def text(self) -> str:
        if self.value is None:
            raise ValueError("stream attachments have no text form")
        return self.value

    def __repr__(self) -> str:
        if self.is_stream:
            return f"InputFile(kind=stream, info={self.info!r})"
        return f"InputFile(kind={self.kind.value}, value={self.value!r})"
