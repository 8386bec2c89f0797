from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import TomlConfigSettingsSource

from .api.client import DEFAULT_HOST, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_S
from .config import HOME_CONFIG_PATH, ConfigError


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="BOTWIRE__",
        env_nested_delimiter="__",
    )

    bot_token: SecretStr
    host: str = DEFAULT_HOST
    max_retries: int = DEFAULT_MAX_RETRIES
    timeout_s: float = DEFAULT_TIMEOUT_S
    proxy: str | None = None

    @field_validator("bot_token", mode="before")
    @classmethod
    def _validate_bot_token(cls, value: Any) -> Any:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if not isinstance(value, str):
            raise ValueError("bot_token must be a string")
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("bot_token must be a non-empty string")
        return cleaned

    @field_validator("host", mode="before")
    @classmethod
    def _validate_host(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("host must be a string")
        cleaned = value.strip().rstrip("/")
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError("host must be an http(s) URL")
        return cleaned

    @field_validator("max_retries", mode="before")
    @classmethod
    def _validate_max_retries(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("max_retries must be an integer")
        if isinstance(value, int) and value < 0:
            raise ValueError("max_retries must be >= 0")
        return value

    @field_validator("timeout_s")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_s must be positive")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(path: str | Path | None = None) -> tuple[BotSettings, Path]:
    cfg_path = _resolve_config_path(path)
    _ensure_config_file(cfg_path)
    return _load_settings_from_path(cfg_path), cfg_path


def load_settings_if_exists(
    path: str | Path | None = None,
) -> tuple[BotSettings, Path] | None:
    cfg_path = _resolve_config_path(path)
    if cfg_path.exists():
        _ensure_config_file(cfg_path)
        return _load_settings_from_path(cfg_path), cfg_path
    return None


def _resolve_config_path(path: str | Path | None) -> Path:
    return Path(path).expanduser() if path else HOME_CONFIG_PATH


def _ensure_config_file(cfg_path: Path) -> None:
    if cfg_path.exists() and not cfg_path.is_file():
        raise ConfigError(f"Config path {cfg_path} exists but is not a file.") from None
    if not cfg_path.exists():
        raise ConfigError(f"Missing config file {cfg_path}.") from None


def _load_settings_from_path(cfg_path: Path) -> BotSettings:
    cfg = dict(BotSettings.model_config)
    cfg["toml_file"] = cfg_path
    Bound = type(
        "BotSettingsBound",
        (BotSettings,),
        {"model_config": SettingsConfigDict(**cfg)},
    )
    try:
        return Bound()
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {cfg_path}: {exc}") from exc
    except Exception as exc:  # pragma: no cover - safety net
        raise ConfigError(f"Failed to load config {cfg_path}: {exc}") from exc
