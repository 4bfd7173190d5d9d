"""Shared SQLAlchemy engine and query helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.sql.elements import ClauseElement

from .database_url import get_database_url
from .settings import AppSettings


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide SQLAlchemy engine."""

    settings = AppSettings.load()
    database_url = settings.database_url or get_database_url()
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    # SQLite (tests, local demo) does not accept pool_size/max_overflow.
    if not database_url.startswith("sqlite"):
        kwargs.update(
            {
                "pool_size": max(1, settings.db_pool_size),
                "max_overflow": max(0, settings.db_pool_max_overflow),
            }
        )
    return create_engine(database_url, **kwargs)


def _normalize_statement(sql: str | ClauseElement) -> ClauseElement:
    if isinstance(sql, str):
        return text(sql)
    if isinstance(sql, ClauseElement):
        return sql
    raise TypeError("sql must be a string or SQLAlchemy ClauseElement")


def query_df(
    sql: str | ClauseElement,
    params: Mapping[str, Any] | None = None,
    *,
    engine: Engine | None = None,
) -> pd.DataFrame:
    """Run a SELECT and return the rows as a pandas DataFrame."""

    statement = _normalize_statement(sql)
    if params is not None and not isinstance(params, Mapping):
        raise TypeError("params must be a mapping when provided")

    eng = engine or get_engine()
    with eng.connect() as conn:
        result = conn.execute(statement, dict(params or {}))
        columns = list(result.keys())
        rows = result.fetchall()

    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([tuple(row) for row in rows], columns=columns)


__all__ = ["get_engine", "query_df"]
