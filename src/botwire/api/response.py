"""Decoding of the ``{"ok": ..., "result": ...}`` response envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import msgspec

from ..errors import ResponseDecodeError, ResponseError

T = TypeVar("T")


class ResponseParameters(msgspec.Struct, forbid_unknown_fields=False):
    retry_after: int | None = None
    migrate_to_chat_id: int | None = None


class _Envelope(msgspec.Struct, forbid_unknown_fields=False):
    ok: bool
    description: str | None = None
    error_code: int | None = None
    parameters: ResponseParameters | None = None


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    result: T


type Response[T] = Success[T] | ResponseError


def retry_after(response: Response[Any]) -> int | None:
    if isinstance(response, ResponseError):
        return response.retry_after
    return None


def decode_response(
    content: bytes,
    result_type: Any,
    *,
    status: int | None = None,
) -> Response[Any]:
    """Decode one response body.

    A rejection is returned, not raised, so the caller can decide whether to
    retry. Bodies that are not an envelope, or whose ``result`` does not match
    ``result_type``, raise :class:`ResponseDecodeError`.
    """
    try:
        raw = msgspec.json.decode(content)
    except msgspec.DecodeError as exc:
        raise ResponseDecodeError(
            f"response is not valid JSON: {exc}", status=status
        ) from exc
    if not isinstance(raw, dict):
        raise ResponseDecodeError("response is not a JSON object", status=status)
    try:
        envelope = msgspec.convert(raw, _Envelope)
    except msgspec.ValidationError as exc:
        raise ResponseDecodeError(
            f"invalid response envelope: {exc}", status=status
        ) from exc

    if envelope.ok:
        if "result" not in raw:
            return ResponseError("response is ok, but result is not provided")
        try:
            return Success(msgspec.convert(raw["result"], result_type))
        except msgspec.ValidationError as exc:
            raise ResponseDecodeError(
                f"can not decode result: {exc}", status=status
            ) from exc

    params = envelope.parameters or ResponseParameters()
    hint = params.retry_after
    if hint is not None and hint < 0:
        hint = None
    return ResponseError(
        envelope.description or "no description",
        error_code=envelope.error_code,
        migrate_to_chat_id=params.migrate_to_chat_id,
        retry_after=hint,
    )
