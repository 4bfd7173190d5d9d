"""Centralised configuration for the inventory core, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _list_env(*names: str) -> list[str]:
    for name in names:
        raw = os.getenv(name)
        if raw:
            return [entry.strip() for entry in raw.split(",") if entry.strip()]
    return []


@dataclass(frozen=True)
class AppSettings:
    app_env: str = "development"
    database_url: str = ""
    db_pool_size: int = 10
    db_pool_max_overflow: int = 20
    cors_allowed_origins: list[str] = None
    jwt_secret_keys: list[str] = None
    skip_schema_init: bool = False

    @staticmethod
    def load() -> "AppSettings":
        load_dotenv()
        return AppSettings(
            app_env=os.getenv("APP_ENV", os.getenv("ENV", "development")).lower(),
            database_url=os.getenv("DATABASE_URL", ""),
            db_pool_size=_int_env("DB_POOL_SIZE", 10),
            db_pool_max_overflow=_int_env("DB_POOL_MAX_OVERFLOW", 20),
            cors_allowed_origins=_list_env("CORS_ALLOWED_ORIGINS"),
            jwt_secret_keys=_list_env("JWT_SECRET_KEYS", "JWT_SECRET_KEY"),
            skip_schema_init=_bool_env("SKIP_SCHEMA_INIT"),
        )

    @property
    def is_production(self) -> bool:
        return self.app_env in {"prod", "production", "staging"}
