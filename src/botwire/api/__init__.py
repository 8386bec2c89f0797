"""Request execution core: payloads, forms, response decoding and the client."""

from .client import DEFAULT_HOST, DEFAULT_MAX_RETRIES, Client, FileStream
from .form import ATTACH_PREFIX, Form, MultipartBody, media_field_name
from .input_file import InputFile, InputFileInfo, InputFileKind
from .method import Method
from .payload import (
    Payload,
    PayloadKind,
    PreparedRequest,
    build_download_url,
    build_url,
)
from .response import Response, ResponseParameters, Success, decode_response

__all__ = [
    "ATTACH_PREFIX",
    "DEFAULT_HOST",
    "DEFAULT_MAX_RETRIES",
    "Client",
    "FileStream",
    "Form",
    "InputFile",
    "InputFileInfo",
    "InputFileKind",
    "Method",
    "MultipartBody",
    "Payload",
    "PayloadKind",
    "PreparedRequest",
    "Response",
    "ResponseParameters",
    "Success",
    "build_download_url",
    "build_url",
    "decode_response",
    "media_field_name",
]
