import pytest
import structlog

from botwire.logging import _redact_processor, redact_token, setup_logging

TOKEN = "123:abcDEF_ghij"


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (
            f"https://api.telegram.org/bot{TOKEN}/getMe",
            "https://api.telegram.org/bot[REDACTED]/getMe",
        ),
        (
            f"https://api.telegram.org/file/bot{TOKEN}/docs/a.txt",
            "https://api.telegram.org/file/bot[REDACTED]/docs/a.txt",
        ),
        ("no url here", "no url here"),
        ("https://example.com/botwire/docs", "https://example.com/botwire/docs"),
        ("/bottles/42:ab", "/bottles/42:ab"),
    ],
)
def test_redact_token(raw: str, expected: str) -> None:
    assert redact_token(raw) == expected


def test_processor_redacts_string_values() -> None:
    event = _redact_processor(
        None,
        "info",
        {"event": "api.request", "url": f"http://h/bot{TOKEN}/getMe", "n": 1},
    )

    assert event == {"event": "api.request", "url": "http://h/bot[REDACTED]/getMe", "n": 1}


def test_setup_logging_installs_redaction() -> None:
    setup_logging(debug=True)

    config = structlog.get_config()
    assert _redact_processor in config["processors"]
