"""The interface shared by the long-poll loop and the webhook receiver."""

from __future__ import annotations

from typing import Protocol

import anyio

from .types import Update


class UpdateHandler(Protocol):
    async def handle(self, update: Update) -> None: ...


class SyncedUpdateHandler:
    """Run a handler that is not safe to call concurrently, one update at a time.

    Both receivers dispatch updates concurrently; wrap stateful handlers in
    this class to serialize them.
    """

    def __init__(self, handler: UpdateHandler) -> None:
        self._handler = handler
        self._lock = anyio.Lock()

    async def handle(self, update: Update) -> None:
        async with self._lock:
            await self._handler.handle(update)
