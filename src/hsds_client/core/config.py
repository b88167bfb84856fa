"""Client configuration: `HsdsSettings` and the per-user `.env` written by `setup`."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hsds_client import __version__

_APP_DIR_NAME = "hsds-client"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def get_user_config_dir() -> Path:
    """Directory holding the per-user `.env` (`%APPDATA%`, macOS Application Support or XDG)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / _APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / _APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / _APP_DIR_NAME
    return Path.home() / ".config" / _APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Set `KEY=value` lines in the per-user `.env` and return its path.

    Existing lines for the given keys are replaced in place, other lines are
    kept. `None` values leave the key untouched.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    pending = {key: value for key, value in values.items() if value is not None}

    lines: list[str] = []
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            key = line.partition("=")[0].strip()
            if key in pending:
                line = f"{key}={pending.pop(key)}"
            lines.append(line)
    else:
        lines.append("# hsds-client user config")

    lines.extend(f"{key}={value}" for key, value in pending.items())
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class HsdsSettings(BaseSettings):
    """Central client configuration.

    Values come from `HSDS_*` environment variables, then the project `.env`,
    then the per-user `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix="HSDS_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    endpoint: str = Field(
        default="http://localhost:5101",
        min_length=8,
        description="Base URL of the HSDS service node.",
    )
    username: str | None = Field(
        default=None,
        description="User for HTTP Basic authentication.",
    )
    password: str | None = Field(
        default=None,
        description="Password for HTTP Basic authentication.",
    )
    token: str | None = Field(
        default=None,
        description="Bearer token; takes precedence over username/password.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default=f"hsds-client/{__version__}",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the CLI.",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level
