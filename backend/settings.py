"""Backend (FastAPI) configuration built on core.settings.AppSettings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from core.settings import AppSettings as CoreSettings


@dataclass(frozen=True)
class Settings(CoreSettings):
    allow_insecure_jwt_default: bool = False
    log_level: str = "INFO"

    @staticmethod
    def load() -> "Settings":
        core = CoreSettings.load()
        allow_insecure = (
            os.getenv("ALLOW_INSECURE_JWT_DEFAULT", "").strip().lower() in {"1", "true", "yes", "on"}
            or core.app_env in {"development", "dev", "test"}
        )
        return Settings(
            app_env=core.app_env,
            database_url=core.database_url,
            db_pool_size=core.db_pool_size,
            db_pool_max_overflow=core.db_pool_max_overflow,
            cors_allowed_origins=core.cors_allowed_origins,
            jwt_secret_keys=core.jwt_secret_keys,
            skip_schema_init=core.skip_schema_init,
            allow_insecure_jwt_default=allow_insecure,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
