"""DATABASE_URL resolution for the inventory engine."""

from __future__ import annotations

import os

from sqlalchemy.engine import URL

DEFAULT_DRIVER = "postgresql+psycopg2"


def _first_env(*names: str, default: str | None = None) -> str | None:
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return default


def get_database_url() -> str:
    """Return ``DATABASE_URL`` as is, or assemble one from the ``DB_*`` variables.

    ``POSTGRES_*`` names are read as fallbacks so the docker-compose env file
    of the database container can be shared.
    """

    explicit_url = _first_env("DATABASE_URL")
    if explicit_url:
        return explicit_url

    port = _first_env("DB_PORT", "POSTGRES_PORT", default="5432")
    try:
        port_number = int(port)
    except ValueError as exc:
        raise RuntimeError(f"DB_PORT must be an integer, got {port!r}") from exc

    url = URL.create(
        DEFAULT_DRIVER,
        username=_first_env("DB_USER", "POSTGRES_USER", default="postgres"),
        password=_first_env("DB_PASSWORD", "POSTGRES_PASSWORD"),
        host=_first_env("DB_HOST", "POSTGRES_HOST", default="localhost"),
        port=port_number,
        database=_first_env("DB_NAME", "POSTGRES_DB", default="stockwise"),
    )
    return url.render_as_string(hide_password=False)


__all__ = ["get_database_url"]
