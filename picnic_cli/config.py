"""Configuration loading and persistence for picnic-cli."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import EXIT_INVALID_INPUT, ConfigError
from .models import CountryCode, OutputFormat
from .picnic.client import DEFAULT_API_VERSION

logger = logging.getLogger(__name__)

APP_NAME = "picnic-cli"

# Keys `picnic config set` may change; auth state is only written by login/logout
EDITABLE_KEYS = ("countryCode", "apiVersion", "defaultOutput")


class CliConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    country_code: CountryCode = Field(default=CountryCode.NL, alias="countryCode")
    api_version: str = Field(default=DEFAULT_API_VERSION, alias="apiVersion")
    auth_key: str | None = Field(default=None, alias="authKey")
    username: str | None = None
    default_output: OutputFormat = Field(default=OutputFormat.PRETTY, alias="defaultOutput")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def config_path() -> Path:
    """Per-user config file; $PICNIC_CLI_CONFIG overrides the default location."""
    override = os.environ.get("PICNIC_CLI_CONFIG")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    return Path(base).expanduser() / APP_NAME / "config.json"


def load_config(path: Path | None = None) -> CliConfig:
    path = path or config_path()
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return CliConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return CliConfig.model_validate(raw)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def save_config(config: CliConfig, path: Path | None = None) -> None:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.to_json() + "\n", encoding="utf-8")
    logger.debug("Saved config to %s", path)


def _update(path: Path | None = None, **changes) -> CliConfig:
    config = load_config(path).model_copy(update=changes)
    save_config(config, path)
    return config


def set_auth_key(auth_key: str, path: Path | None = None) -> None:
    _update(path, auth_key=auth_key)


def set_username(username: str, path: Path | None = None) -> None:
    _update(path, username=username)


def clear_auth(path: Path | None = None) -> None:
    """Forget the auth key; the username is kept for the next login prompt."""
    _update(path, auth_key=None)


def set_value(key: str, value: str, path: Path | None = None) -> CliConfig:
    """Set one user-editable key (camelCase, as stored in the file)."""
    if key not in EDITABLE_KEYS:
        raise ConfigError(
            f"Unknown config key '{key}'. Editable keys: {', '.join(EDITABLE_KEYS)}",
            exit_code=EXIT_INVALID_INPUT,
        )
    if key == "countryCode":
        value = value.upper()
    elif key == "defaultOutput":
        value = value.lower()

    data = load_config(path).model_dump(by_alias=True)
    data[key] = value
    try:
        config = CliConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {value}", exit_code=EXIT_INVALID_INPUT) from e
    save_config(config, path)
    return config
