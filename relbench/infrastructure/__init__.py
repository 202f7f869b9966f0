"""
Infrastructure package for the relational fetch benchmark.

Centralizes database connectivity concerns (DSN composition, engine creation
with connection retries). Keep this layer focused on I/O, decoupled from
strategy/orchestrator logic.
"""

from relbench.infrastructure.db_factory import build_dsn, create_db_engine

__all__ = [
    "build_dsn",
    "create_db_engine",
]
