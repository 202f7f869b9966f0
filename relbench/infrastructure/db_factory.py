"""
Database connection factory for the relational fetch benchmark.

Builds the connection string from settings and opens a SQLAlchemy engine on
top of the psycopg driver. Opening is retried with a fixed interval, using
tenacity, so the benchmark can be started alongside a database container
that is still booting.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import InterfaceError, OperationalError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from relbench.config import Settings, get_settings
from relbench.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None, driver: Optional[str] = "psycopg") -> str:
    """
    Compose a DSN string from settings.

    Parameters
    ----------
    settings : Settings | None
        Settings to read from; defaults to the cached process settings.
    driver : str | None
        SQLAlchemy driver suffix. Pass None for a plain libpq URL usable by
        psycopg directly.
    """
    settings = settings or get_settings()
    scheme = f"postgresql+{driver}" if driver else "postgresql"
    return (
        f"{scheme}://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    stop = retry_state.retry_object.stop
    max_attempts = getattr(stop, "max_attempt_number", "?")
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    log.warning(
        f"Failed to connect to database (attempt {retry_state.attempt_number}/{max_attempts}): {exc}",
        extra={"attempt": retry_state.attempt_number, "max_attempts": max_attempts},
    )


def _open_engine(dsn: str, echo: bool) -> Engine:
    engine = create_engine(dsn, echo=echo)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        engine.dispose()
        raise
    return engine


def create_db_engine(
    dsn: Optional[str] = None,
    retries: Optional[int] = None,
    retry_interval: Optional[float] = None,
    echo: bool = False,
) -> Engine:
    """
    Create an engine and verify the database is reachable.

    Each failed attempt is logged and followed by a fixed sleep. Once the
    attempt budget is spent the last driver error is re-raised.

    Parameters
    ----------
    dsn : str | None
        Connection string override; defaults to `build_dsn()`.
    retries : int | None
        Maximum number of attempts; defaults to `DB_CONNECT_RETRIES`.
    retry_interval : float | None
        Seconds to sleep between attempts; defaults to
        `DB_CONNECT_RETRY_INTERVAL`.
    echo : bool
        Whether SQLAlchemy should log every statement.

    Returns
    -------
    Engine
        A connected SQLAlchemy engine.

    Raises
    ------
    sqlalchemy.exc.OperationalError
        If the database is still unreachable after all attempts.
    """
    settings = get_settings()
    dsn = dsn or build_dsn(settings)
    attempts = retries if retries is not None else settings.db_connect_retries
    interval = retry_interval if retry_interval is not None else settings.db_connect_retry_interval

    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(interval),
        retry=retry_if_exception_type((OperationalError, InterfaceError)),
        before_sleep=_log_failed_attempt,
        reraise=True,
    )
    engine = retrying(_open_engine, dsn, echo)
    log.info("Successfully connected to database", extra={"dialect": engine.dialect.name})
    return engine


__all__ = ["build_dsn", "create_db_engine"]
