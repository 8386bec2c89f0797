import contextlib

import anyio
import httpx
import msgspec
import pytest

from botwire.longpoll import LongPoll, LongPollOptions, poll_updates
from botwire.types import Update


@pytest.mark.anyio
async def test_poll_updates_advances_offset(make_client) -> None:
    batches = [[{"update_id": 3}, {"update_id": 4}], [], [{"update_id": 9}]]
    sent: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(msgspec.json.decode(request.content))
        result = batches.pop(0) if batches else []
        return httpx.Response(200, json={"ok": True, "result": result})

    client = make_client(handler)
    options = LongPollOptions(limit=50, poll_timeout_s=1, allowed_updates=("message",))
    received: list[int] = []

    async with contextlib.aclosing(poll_updates(client, options)) as updates:
        async for update in updates:
            received.append(update.update_id)
            if len(received) == 3:
                break

    assert received == [3, 4, 9]
    assert [body["offset"] for body in sent] == [1, 5, 5]
    assert sent[0]["limit"] == 50
    assert sent[0]["timeout"] == 1
    assert sent[0]["allowed_updates"] == ["message"]


@pytest.mark.anyio
async def test_poll_updates_waits_after_errors(make_client) -> None:
    responses = [
        httpx.Response(429, json={"ok": False, "parameters": {"retry_after": 7}}),
        httpx.Response(500, text="oops"),
        httpx.Response(200, json={"ok": True, "result": [{"update_id": 1}]}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = make_client(handler, max_retries=0)
    waits: list[float] = []

    async def sleep(delay: float) -> None:
        waits.append(delay)

    options = LongPollOptions(error_timeout_s=2.5)
    async with contextlib.aclosing(poll_updates(client, options, sleep=sleep)) as updates:
        async for update in updates:
            assert update.update_id == 1
            break

    assert waits == [7.0, 2.5]


class _Recorder:
    def __init__(self) -> None:
        self.update_ids: list[int] = []

    async def handle(self, update: Update) -> None:
        self.update_ids.append(update.update_id)


@pytest.mark.anyio
async def test_long_poll_dispatches_until_shutdown(make_client) -> None:
    recorder = _Recorder()
    poll: LongPoll | None = None
    requests: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(msgspec.json.decode(request.content)["offset"])
        if len(requests) == 1:
            result = [{"update_id": 1}, {"update_id": 2}]
        else:
            assert poll is not None
            poll.get_handle().shutdown()
            result = [{"update_id": 3}]
        return httpx.Response(200, json={"ok": True, "result": result})

    poll = LongPoll(make_client(handler), recorder)
    with anyio.fail_after(5):
        await poll.run()

    assert sorted(recorder.update_ids) == [1, 2, 3]
    assert requests == [1, 3]


@pytest.mark.anyio
async def test_shutdown_before_run_sends_nothing(make_client) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "result": []})

    poll = LongPoll(make_client(handler), _Recorder())
    poll.get_handle().shutdown()

    await poll.run()

    assert requests == []
