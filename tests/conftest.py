"""
Pytest configuration for the relational fetch benchmark.

Provides fixtures for:
- In-memory SQLite engines with the benchmark schema (unit tests)
- Statement capture to assert round-trip counts
- PostgreSQL connection, schema and seeding for integration tests
"""

from __future__ import annotations

import os
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Generator, List

import psycopg
import pytest
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session

from relbench.config import Settings, get_settings
from relbench.domain.schema import Base, Company, File, Job

INIT_SQL_PATH = Path(__file__).parent.parent / "db" / "init.sql"


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so env changes in one test never leak into another."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def sqlite_engine() -> Generator[Engine, None, None]:
    """
    Empty in-memory SQLite database with the three benchmark tables.
    """
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


def _job(uuid: str, title: str, company_id: str, salary: str = "100000.00") -> Job:
    return Job(
        uuid=uuid,
        job_title=title,
        company_id=company_id,
        location="Berlin",
        salary=Decimal(salary),
        posted_date=date(2024, 3, 1),
    )


@pytest.fixture()
def scenario_engine(sqlite_engine: Engine) -> Engine:
    """
    One company (C1/Acme) and one job (J1/Engineer) without files.
    """
    with Session(sqlite_engine) as session:
        session.add(Company(company_id="C1", company_name="Acme"))
        session.add(_job("J1", "Engineer", "C1"))
        session.commit()
    return sqlite_engine


@pytest.fixture()
def seeded_engine(sqlite_engine: Engine) -> Engine:
    """
    Small dataset covering the relationship edge cases:

    - J1 (Acme) has no files
    - J2 (Globex) has two files
    - J3 references a company that does not exist and has one file
    """
    with Session(sqlite_engine) as session:
        session.add_all(
            [
                Company(company_id="C1", company_name="Acme"),
                Company(company_id="C2", company_name="Globex"),
                _job("J1", "Engineer", "C1"),
                _job("J2", "Designer", "C2", salary="85000.50"),
                _job("J3", "Analyst", "C404", salary="70000.00"),
                File(file_id="F2", file_name="portfolio.pdf", job_id="J2"),
                File(file_id="F3", file_name="cover.docx", job_id="J2"),
                File(file_id="F4", file_name="resume.pdf", job_id="J3"),
            ]
        )
        session.commit()
    return sqlite_engine


@pytest.fixture()
def captured_statements(seeded_engine: Engine) -> Generator[List[str], None, None]:
    """
    SQL statements sent to `seeded_engine` from this point on.
    """
    statements: List[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement)

    event.listen(seeded_engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(seeded_engine, "before_cursor_execute", _record)


# --- PostgreSQL (integration) ------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "password"),
        db_name=os.getenv("DB_NAME", "benchmark"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    libpq connection string for tests (psycopg, no SQLAlchemy driver suffix).
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the company, jobs and files tables exist.
    """
    with db_connection.cursor() as cur:
        cur.execute(INIT_SQL_PATH.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="session")
def pg_engine(test_dsn: str, db_schema_initialized: bool) -> Generator[Engine, None, None]:
    engine = create_engine(test_dsn.replace("postgresql://", "postgresql+psycopg://", 1))
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def seeded_pg_small(
    db_connection: psycopg.Connection,
    db_schema_initialized: bool,
    test_dsn: str,
    tmp_path: Path,
) -> int:
    """
    Seed a small dataset (5 companies, 40 jobs) into a truncated database.

    Returns the number of jobs seeded.
    """
    from scripts.generate_data import _copy_into_db, _generate_dataset_csv

    jobs = 40
    csv_paths = _generate_dataset_csv(
        tmp_path, companies=5, jobs=jobs, max_files_per_job=3, seed=42, orphan_ratio=0.25
    )
    _copy_into_db(test_dsn, csv_paths, truncate=True)

    with db_connection.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM jobs;")
        count = cur.fetchone()[0]
    db_connection.commit()
    return count
