from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

import anyio
import httpx

from ..errors import (
    ClientError,
    DownloadFileError,
    ResponseError,
    RetryAfter,
    TransportError,
)
from ..logging import get_logger, redact_token
from .method import Method
from .payload import PreparedRequest, build_download_url
from .response import Response, Success, decode_response, retry_after

if TYPE_CHECKING:
    from ..settings import BotSettings

logger = get_logger(__name__)

DEFAULT_HOST = "https://api.telegram.org"
DEFAULT_MAX_RETRIES = 2
DEFAULT_TIMEOUT_S = 120.0

R = TypeVar("R")


def _into_result(response: Response[R]) -> R:
    if isinstance(response, Success):
        return response.result
    if response.retry_after is not None:
        raise RetryAfter.from_error(response)
    raise response


class FileStream:
    """Chunks of a file being downloaded, read lazily from the connection.

    The stream can be consumed once. It closes the connection when exhausted;
    call :meth:`aclose` (or use ``async with``) to stop early.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._chunks: Any = None

    @property
    def content_length(self) -> int | None:
        raw = self._response.headers.get("Content-Length")
        return int(raw) if raw is not None and raw.isdigit() else None

    def __aiter__(self) -> FileStream:
        return self

    async def __anext__(self) -> bytes:
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()
        try:
            return await anext(self._chunks)
        except StopAsyncIteration:
            await self.aclose()
            raise
        except httpx.HTTPError as exc:
            await self.aclose()
            raise TransportError(redact_token(str(exc))) from exc

    async def aclose(self) -> None:
        await self._response.aclose()

    async def __aenter__(self) -> FileStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class Client:
    """Bot API client.

    The client holds only immutable configuration and a shared
    ``httpx.AsyncClient``, so one instance may serve concurrent calls.
    """

    def __init__(
        self,
        token: str,
        *,
        host: str = DEFAULT_HOST,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        proxy: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
    ) -> None:
        if not token:
            raise ClientError("bot token is empty")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        owns_client = http_client is None
        if http_client is None:
            try:
                http_client = httpx.AsyncClient(timeout=timeout_s, proxy=proxy)
            except (httpx.InvalidURL, ValueError, OSError) as exc:
                raise ClientError(str(exc)) from exc
        self._token = token
        self._host = host.rstrip("/")
        self._max_retries = max_retries
        self._http = http_client
        self._owns_client = owns_client
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: BotSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> Client:
        return cls(
            settings.bot_token.get_secret_value(),
            host=settings.host,
            max_retries=settings.max_retries,
            timeout_s=settings.timeout_s,
            proxy=settings.proxy,
            http_client=http_client,
        )

    @property
    def host(self) -> str:
        return self._host

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def with_host(self, host: str) -> Client:
        clone = copy.copy(self)
        clone._host = host.rstrip("/")
        clone._owns_client = False
        return clone

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return (
            f"Client(host={self._host!r}, token='...', "
            f"max_retries={self._max_retries})"
        )

    async def execute(self, method: Method[R]) -> R:
        """Run ``method`` and return its decoded result.

        Rejections carrying ``retry_after`` are retried up to ``max_retries``
        times after sleeping for the hinted number of seconds. Requests that
        upload a stream are sent once since the stream can not be replayed.
        Files opened by ``InputFile.path`` are closed before returning.
        """
        payload = method.into_payload()
        pending = payload.prepare(self._host, self._token)
        try:
            return await self._execute(
                payload.method_name, pending, method.response_type
            )
        finally:
            pending.close()

    async def _execute(
        self,
        method_name: str,
        pending: PreparedRequest,
        response_type: Any,
    ) -> Any:
        retries = 0
        while True:
            duplicate = pending.try_clone()
            if duplicate is None:
                logger.debug(
                    "api.request.not_cloneable",
                    method=method_name,
                )
                response = await self._send(pending, response_type, method_name)
                return _into_result(response)

            response = await self._send(duplicate, response_type, method_name)
            hint = retry_after(response)
            if hint is None or retries >= self._max_retries:
                return _into_result(response)
            retries += 1
            logger.info(
                "api.retry_after",
                method=method_name,
                retry_after=hint,
                attempt=retries,
                max_retries=self._max_retries,
            )
            await self._sleep(hint)

    async def _send(
        self,
        request: PreparedRequest,
        response_type: Any,
        method_name: str,
    ) -> Response[Any]:
        http_request = request.build(self._http)
        try:
            resp = await self._http.send(http_request)
        except httpx.HTTPError as exc:
            logger.error(
                "api.network_error",
                method=method_name,
                url=str(http_request.url),
                error=str(exc),
                error_type=exc.__class__.__name__,
            )
            raise TransportError(redact_token(str(exc))) from exc

        response = decode_response(
            resp.content, response_type, status=resp.status_code
        )
        if isinstance(response, ResponseError):
            logger.debug(
                "api.response.error",
                method=method_name,
                status=resp.status_code,
                description=response.description,
                error_code=response.error_code,
                retry_after=response.retry_after,
            )
        else:
            logger.debug("api.response", method=method_name, status=resp.status_code)
        return response

    async def download_file(self, file_path: str) -> FileStream:
        """Start downloading ``file_path`` as returned by ``getFile``.

        Non-2xx answers raise :class:`DownloadFileError` with the status and
        body text before any chunk is handed out.
        """
        url = build_download_url(self._host, self._token, file_path)
        logger.debug("api.download", url=url)
        request = self._http.build_request("GET", url)
        try:
            resp = await self._http.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise DownloadFileError(
                f"failed to download file: {redact_token(str(exc))}"
            ) from exc

        if resp.is_success:
            return FileStream(resp)
        try:
            await resp.aread()
        except httpx.HTTPError as exc:
            raise DownloadFileError(
                f"failed to download file: {redact_token(str(exc))}"
            ) from exc
        finally:
            await resp.aclose()
        logger.debug("api.download.error", url=url, status=resp.status_code)
        raise DownloadFileError.from_response(resp.status_code, resp.text)
