from collections.abc import Callable

import httpx
import pytest

from botwire.api import Client

TOKEN = "123:abcDEF_ghij"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_client(sleeps: list[float]) -> Callable[..., Client]:
    async def sleep(delay: float) -> None:
        sleeps.append(delay)

    def _factory(handler: Handler, **kwargs) -> Client:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Client(TOKEN, http_client=http_client, sleep=sleep, **kwargs)

    return _factory
