"""Typed async client for the Telegram Bot API."""

from .api import (
    Client,
    FileStream,
    Form,
    InputFile,
    InputFileInfo,
    Method,
    Payload,
)
from .errors import (
    BotApiError,
    ClientError,
    DownloadFileError,
    ExecuteError,
    FormError,
    PayloadError,
    ResponseDecodeError,
    ResponseError,
    RetryAfter,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "BotApiError",
    "Client",
    "ClientError",
    "DownloadFileError",
    "ExecuteError",
    "FileStream",
    "Form",
    "FormError",
    "InputFile",
    "InputFileInfo",
    "Method",
    "Payload",
    "PayloadError",
    "ResponseDecodeError",
    "ResponseError",
    "RetryAfter",
    "TransportError",
    "__version__",
]
