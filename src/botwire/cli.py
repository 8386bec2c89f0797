from __future__ import annotations

from pathlib import Path

import anyio
import msgspec
import typer
from rich.console import Console

from . import __version__
from .api import Client
from .config import ConfigError
from .errors import BotApiError, DownloadFileError
from .logging import setup_logging
from .methods import GetFile, GetMe
from .settings import BotSettings, load_settings


def _print_version_and_exit() -> None:
    typer.echo(__version__)
    raise typer.Exit()


def _version_callback(value: bool) -> None:
    if value:
        _print_version_and_exit()


def _load_settings_or_exit(config: Path | None) -> BotSettings:
    try:
        settings, _ = load_settings(config)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None
    return settings


def _build_client(settings: BotSettings) -> Client:
    return Client.from_settings(settings)


async def _get_me(settings: BotSettings) -> bytes:
    async with _build_client(settings) as client:
        user = await client.execute(GetMe())
    return msgspec.json.encode(user)


async def _download(settings: BotSettings, file_id: str, dest: Path) -> int:
    async with _build_client(settings) as client:
        file = await client.execute(GetFile(file_id))
        if file.file_path is None:
            raise DownloadFileError(f"file {file_id!r} has no download path")
        written = 0
        async with await client.download_file(file.file_path) as stream:
            async with await anyio.open_file(dest, "wb") as out:
                async for chunk in stream:
                    await out.write(chunk)
                    written += len(chunk)
    return written


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Call the Bot API from the command line.",
)

_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to the botwire TOML config.",
)
_DEBUG_OPTION = typer.Option(
    False,
    "--debug/--no-debug",
    help="Log requests and responses.",
)


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """botwire CLI."""


@app.command("get-me")
def get_me(
    config: Path | None = _CONFIG_OPTION,
    debug: bool = _DEBUG_OPTION,
) -> None:
    """Print the bot's own user object."""
    setup_logging(debug=debug)
    settings = _load_settings_or_exit(config)
    try:
        payload = anyio.run(_get_me, settings)
    except BotApiError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None
    Console().print_json(payload.decode())


@app.command("download")
def download(
    file_id: str = typer.Argument(..., help="file_id of the file to fetch."),
    dest: Path = typer.Argument(..., help="Where to write the file."),
    config: Path | None = _CONFIG_OPTION,
    debug: bool = _DEBUG_OPTION,
) -> None:
    """Resolve a file_id with getFile and stream it to DEST."""
    setup_logging(debug=debug)
    settings = _load_settings_or_exit(config)
    try:
        written = anyio.run(_download, settings, file_id, dest)
    except BotApiError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None
    typer.echo(f"saved {written} bytes to {dest}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
