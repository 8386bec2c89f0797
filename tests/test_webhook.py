import pytest
from starlette.testclient import TestClient

from botwire import webhook
from botwire.types import Update

UPDATE = {
    "update_id": 10,
    "message": {
        "message_id": 1,
        "date": 0,
        "chat": {"id": 5, "type": "private"},
        "text": "hi",
    },
}


class _Recorder:
    def __init__(self) -> None:
        self.updates: list[Update] = []

    async def handle(self, update: Update) -> None:
        self.updates.append(update)


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder()


@pytest.fixture
def client(recorder: _Recorder) -> TestClient:
    return TestClient(webhook.create_app(recorder, "/hook"))


def test_update_is_passed_to_handler(client: TestClient, recorder: _Recorder) -> None:
    response = client.post("/hook", json=UPDATE)

    assert response.status_code == 200
    assert [update.update_id for update in recorder.updates] == [10]
    assert recorder.updates[0].message.text == "hi"


def test_other_methods_are_not_allowed(client: TestClient, recorder: _Recorder) -> None:
    response = client.get("/hook")

    assert response.status_code == 405
    assert response.headers["allow"] == "POST"
    assert recorder.updates == []


def test_other_paths_are_not_found(client: TestClient, recorder: _Recorder) -> None:
    response = client.post("/elsewhere", json=UPDATE)

    assert response.status_code == 404
    assert recorder.updates == []


@pytest.mark.parametrize("body", [b"not json", b'{"message": {}}', b"[]"])
def test_bad_body_is_rejected(
    client: TestClient, recorder: _Recorder, body: bytes
) -> None:
    response = client.post("/hook", content=body)

    assert response.status_code == 400
    assert response.text.startswith("Failed to parse update")
    assert response.headers["content-type"].startswith("text/plain")
    assert recorder.updates == []


@pytest.mark.anyio
async def test_serve_runs_uvicorn(monkeypatch, recorder: _Recorder) -> None:
    configs = []

    async def fake_serve(self, sockets=None) -> None:
        configs.append(self.config)

    monkeypatch.setattr(webhook.uvicorn.Server, "serve", fake_serve)

    await webhook.serve(recorder, host="0.0.0.0", port=9000, path="/hook")

    assert len(configs) == 1
    assert configs[0].host == "0.0.0.0"
    assert configs[0].port == 9000
