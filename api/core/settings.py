"""
Runtime settings loaded from the environment.

Every field can also be overridden by a CLI flag (see `api/cli.py`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = "SQLITE_REST_"

MODES = ("debug", "release", "test")


class SettingsError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    database_path: str
    host: str = "0.0.0.0"
    port: int = 8080
    mode: str = "release"
    username: str = ""
    password: str = ""
    pool_size: int = 4
    shutdown_grace_s: int = 5

    @property
    def auth_enabled(self) -> bool:
        return bool(self.username or self.password)

    @property
    def debug(self) -> bool:
        return self.mode == "debug"

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


def _env(name: str, default: str = "") -> str:
    return os.environ.get(ENV_PREFIX + name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    # Credentials are taken verbatim: surrounding whitespace may be intentional.
    return Settings(
        database_path=_env("DB"),
        host=_env("HOST", "0.0.0.0"),
        port=_env_int("PORT", 8080),
        mode=_env("MODE", "release").lower(),
        username=os.environ.get(ENV_PREFIX + "USERNAME", ""),
        password=os.environ.get(ENV_PREFIX + "PASSWORD", ""),
        pool_size=_env_int("POOL_SIZE", 4),
        shutdown_grace_s=_env_int("SHUTDOWN_GRACE", 5),
    )


def validate_settings(settings: Settings) -> Settings:
    if not settings.database_path:
        raise SettingsError("database path is required")
    if not os.path.isfile(settings.database_path):
        raise SettingsError(f"database file does not exist: {settings.database_path}")
    if settings.mode not in MODES:
        raise SettingsError(f"unknown mode {settings.mode!r}, expected one of {', '.join(MODES)}")
    if settings.pool_size < 1:
        raise SettingsError("pool size must be at least 1")
    if not 0 < settings.port < 65536:
        raise SettingsError(f"invalid port: {settings.port}")
    return settings
