from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

import httpx
import msgspec

from ..errors import PayloadError
from ..logging import get_logger
from .form import Form, PartValue
from .input_file import InputFile

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


def build_url(host: str, token: str, method_name: str) -> str:
    return f"{host}/bot{token}/{method_name}"


def build_download_url(host: str, token: str, file_path: str) -> str:
    return build_url(f"{host}/file", token, file_path)


class PayloadKind(Enum):
    EMPTY = "empty"
    JSON = "json"
    FORM = "form"


@dataclass(frozen=True, slots=True)
class PreparedRequest:
    """A rendered request that can be sent, and repeated if it holds no stream."""

    http_method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes | None = None
    files: list[tuple[str, PartValue]] | None = None
    streams: tuple[InputFile, ...] = ()

    @property
    def has_streams(self) -> bool:
        return bool(self.streams)

    def try_clone(self) -> PreparedRequest | None:
        if self.has_streams:
            return None
        return replace(
            self,
            headers=dict(self.headers),
            files=None if self.files is None else list(self.files),
        )

    def build(self, http_client: httpx.AsyncClient) -> httpx.Request:
        return http_client.build_request(
            self.http_method,
            self.url,
            headers=self.headers,
            content=self.content,
            files=self.files,
        )

    def close(self) -> None:
        """Close the files this request opened itself."""
        for file in self.streams:
            file.close()


@dataclass(slots=True)
class Payload:
    """The body of one method call before it is bound to a host and token."""

    method_name: str
    kind: PayloadKind = PayloadKind.EMPTY
    data: Any = None
    form: Form | None = None

    def __post_init__(self) -> None:
        if not self.method_name:
            raise ValueError("method name must not be empty")

    @classmethod
    def empty(cls, method_name: str) -> Payload:
        return cls(method_name)

    @classmethod
    def json(cls, method_name: str, data: Any) -> Payload:
        return cls(method_name, PayloadKind.JSON, data=data)

    @classmethod
    def from_form(cls, method_name: str, form: Form) -> Payload:
        return cls(method_name, PayloadKind.FORM, form=form)

    @property
    def http_method(self) -> str:
        return "GET" if self.kind is PayloadKind.EMPTY else "POST"

    def build_url(self, host: str, token: str) -> str:
        return build_url(host, token, self.method_name)

    def prepare(self, host: str, token: str) -> PreparedRequest:
        url = self.build_url(host, token)
        match self.kind:
            case PayloadKind.EMPTY:
                logger.debug("api.request", method=self.http_method, url=url, body="empty")
                return PreparedRequest(self.http_method, url)
            case PayloadKind.JSON:
                try:
                    content = msgspec.json.encode(self.data)
                except (msgspec.EncodeError, TypeError) as exc:
                    raise PayloadError(str(exc)) from exc
                logger.debug(
                    "api.request",
                    method=self.http_method,
                    url=url,
                    body=content.decode("utf-8", errors="replace"),
                )
                return PreparedRequest(
                    self.http_method,
                    url,
                    headers={"Content-Type": JSON_CONTENT_TYPE},
                    content=content,
                )
            case PayloadKind.FORM:
                if self.form is None:
                    raise PayloadError("form payload has no form")
                body = self.form.into_multipart()
                logger.debug(
                    "api.request",
                    method=self.http_method,
                    url=url,
                    fields=[name for name, _ in body.parts],
                    streams=body.has_streams,
                )
                return PreparedRequest(
                    self.http_method,
                    url,
                    files=body.parts,
                    streams=tuple(body.streams),
                )
        raise AssertionError(f"unknown payload kind {self.kind!r}")
