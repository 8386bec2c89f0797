"""Receive updates by repeatedly calling ``getUpdates``."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

import anyio

from .api import Client
from .errors import ExecuteError, ResponseError
from .handler import UpdateHandler
from .logging import get_logger
from .methods import GetUpdates
from .types import Update

logger = get_logger(__name__)

DEFAULT_LIMIT = 100
DEFAULT_POLL_TIMEOUT_S = 10
DEFAULT_ERROR_TIMEOUT_S = 5.0


@dataclass(frozen=True, slots=True)
class LongPollOptions:
    offset: int = 0
    limit: int = DEFAULT_LIMIT
    poll_timeout_s: int = DEFAULT_POLL_TIMEOUT_S
    error_timeout_s: float = DEFAULT_ERROR_TIMEOUT_S
    allowed_updates: tuple[str, ...] | None = None


def error_timeout(exc: ExecuteError, default: float) -> float:
    if isinstance(exc, ResponseError) and exc.retry_after is not None:
        return float(exc.retry_after)
    return default


async def poll_updates(
    client: Client,
    options: LongPollOptions | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
    stop: anyio.Event | None = None,
) -> AsyncIterator[Update]:
    """Yield updates, confirming each batch with the next offset.

    Failed polls are logged and retried after ``retry_after`` when the server
    sent one, otherwise after ``error_timeout_s``. Polling ends before the
    next request once ``stop`` is set.
    """
    options = options or LongPollOptions()
    offset = options.offset
    allowed = (
        list(options.allowed_updates) if options.allowed_updates is not None else None
    )
    while stop is None or not stop.is_set():
        method = GetUpdates(
            offset=offset + 1,
            limit=options.limit,
            timeout=options.poll_timeout_s,
            allowed_updates=allowed,
        )
        try:
            updates = await client.execute(method)
        except ExecuteError as exc:
            delay = error_timeout(exc, options.error_timeout_s)
            logger.error(
                "longpoll.error",
                error=str(exc),
                error_type=exc.__class__.__name__,
                retry_in=delay,
            )
            await sleep(delay)
            continue
        for update in updates:
            offset = max(offset, update.update_id)
            yield update


@dataclass(frozen=True, slots=True)
class LongPollHandle:
    _stop: anyio.Event

    def shutdown(self) -> None:
        """Stop the loop before its next ``getUpdates`` request."""
        self._stop.set()


class LongPoll:
    """Pass every polled update to ``handler`` in its own task."""

    def __init__(
        self,
        client: Client,
        handler: UpdateHandler,
        options: LongPollOptions | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = anyio.sleep,
    ) -> None:
        self._client = client
        self._handler = handler
        self._options = options or LongPollOptions()
        self._sleep = sleep
        self._stop = anyio.Event()

    def get_handle(self) -> LongPollHandle:
        return LongPollHandle(self._stop)

    async def run(self) -> None:
        """Poll until shut down, then wait for the handlers still running."""
        updates = poll_updates(
            self._client, self._options, sleep=self._sleep, stop=self._stop
        )
        async with anyio.create_task_group() as tg:
            async with contextlib.aclosing(updates):
                async for update in updates:
                    tg.start_soon(self._handler.handle, update)
        logger.info("longpoll.stopped")
