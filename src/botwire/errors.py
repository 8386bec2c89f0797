"""Exceptions raised by the Bot API client.

Every failure surfaced by :class:`botwire.api.Client` is one of the classes
below, so callers can branch on the type instead of parsing messages.
"""

from __future__ import annotations


class BotApiError(Exception):
    """Base class for all client errors."""


class ClientError(BotApiError):
    """The HTTP transport could not be constructed."""

    def __str__(self) -> str:
        return f"can not build HTTP client: {super().__str__()}"


class ExecuteError(BotApiError):
    """A method call failed."""


class PayloadError(ExecuteError):
    """A method could not be turned into a request body."""

    def __str__(self) -> str:
        return f"could not build an HTTP request: {super().__str__()}"


class FormError(PayloadError):
    """A multipart form field could not be rendered."""


class TransportError(ExecuteError):
    """The request did not produce a usable HTTP response."""


class ResponseDecodeError(ExecuteError):
    """The response body is not a valid envelope for the declared result type."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ResponseError(ExecuteError):
    """The remote API rejected the call."""

    def __init__(
        self,
        description: str,
        *,
        error_code: int | None = None,
        migrate_to_chat_id: int | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(description)
        self.description = description
        self.error_code = error_code
        self.migrate_to_chat_id = migrate_to_chat_id
        self.retry_after = retry_after

    @property
    def can_retry(self) -> bool:
        return self.retry_after is not None

    def __str__(self) -> str:
        parts = [f"a telegram error has occurred: description={self.description}"]
        if self.error_code is not None:
            parts.append(f"error_code={self.error_code}")
        if self.migrate_to_chat_id is not None:
            parts.append(f"migrate_to_chat_id={self.migrate_to_chat_id}")
        if self.retry_after is not None:
            parts.append(f"retry_after={self.retry_after}")
        return "; ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(description={self.description!r}, "
            f"error_code={self.error_code!r}, retry_after={self.retry_after!r})"
        )


class RetryAfter(ResponseError):
    """Rejected with a retry hint after all retries were used up."""

    retry_after: int

    @classmethod
    def from_error(cls, error: ResponseError) -> RetryAfter:
        return cls(
            error.description,
            error_code=error.error_code,
            migrate_to_chat_id=error.migrate_to_chat_id,
            retry_after=error.retry_after,
        )


class DownloadFileError(BotApiError):
    """A file download failed.

    ``status`` and ``text`` are set when the server answered with a non-2xx
    status; both are ``None`` when the request itself failed.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.text = text

    @classmethod
    def from_response(cls, status: int, text: str) -> DownloadFileError:
        return cls(
            f"failed to download file: status={status} text={text}",
            status=status,
            text=text,
        )
