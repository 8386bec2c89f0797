"""Receive updates pushed by the Bot API to an HTTP endpoint."""

from __future__ import annotations

import msgspec
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from .handler import UpdateHandler
from .logging import get_logger
from .types import Update

logger = get_logger(__name__)

DEFAULT_PATH = "/"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def create_app(handler: UpdateHandler, path: str = DEFAULT_PATH) -> Starlette:
    """Build an ASGI app passing every update POSTed to ``path`` to ``handler``.

    Other paths answer 404 and other methods 405 with ``Allow: POST``. A body
    that does not decode to an :class:`~botwire.types.Update` answers 400.
    The response is sent once the handler returns.
    """

    async def receive_update(request: Request) -> Response:
        body = await request.body()
        try:
            update = msgspec.json.decode(body, type=Update)
        except msgspec.DecodeError as exc:
            logger.warning("webhook.bad_update", path=path, error=str(exc))
            return PlainTextResponse(
                f"Failed to parse update: {exc}\n", status_code=400
            )
        logger.debug("webhook.update", update_id=update.update_id)
        await handler.handle(update)
        return Response(status_code=200)

    return Starlette(routes=[Route(path, receive_update, methods=["POST"])])


async def serve(
    handler: UpdateHandler,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    path: str = DEFAULT_PATH,
) -> None:
    """Serve :func:`create_app` with uvicorn until the server is stopped."""
    config = uvicorn.Config(
        create_app(handler, path),
        host=host,
        port=port,
        log_config=None,
    )
    server = uvicorn.Server(config)
    logger.info("webhook.serve", host=host, port=port, path=path)
    await server.serve()
