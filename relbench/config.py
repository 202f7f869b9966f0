"""
Configuration settings for the relational fetch benchmark.

Uses Pydantic Settings to load environment variables for the database
connection, the connection retry budget, output location and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("db", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("password", alias="DB_PASSWORD")
    db_name: str = Field("benchmark", alias="DB_NAME")

    # Connection bootstrap
    db_connect_retries: int = Field(30, alias="DB_CONNECT_RETRIES", ge=1)
    db_connect_retry_interval: float = Field(2.0, alias="DB_CONNECT_RETRY_INTERVAL", ge=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Benchmark
    lazy_load_limit: int = Field(50, alias="LAZY_LOAD_LIMIT", ge=1)
    output_dir: Path = Field(Path("."), alias="OUTPUT_DIR")
    # tracemalloc peak inside timed strategy runs
    trace_allocations: bool = Field(False, alias="TRACE_ALLOCATIONS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
