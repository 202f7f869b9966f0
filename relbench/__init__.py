"""
Relational Fetch Benchmark - compares ORM and SQL strategies for reading
jobs together with their company and attached files.

Strategies:

- Eager loading (batched relationship preloading)
- A single LEFT JOIN with a flat projection
- Lazy loading (one company and one files query per job, N+1)
- Database-side JSON aggregation via correlated subqueries

Each strategy is timed and its result set is written to its own JSON file.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from relbench.config import Settings, get_settings
from relbench.orchestrator import available_strategies, run_strategies
from relbench.strategies.abstract import (
    AbstractBenchmarkStrategy,
    BenchmarkStrategy,
    StrategyResult,
)
from relbench.utils.logging import configure_logging, get_logger
from relbench.utils.profiler import ProfileStats, profile_block

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Orchestration
    "available_strategies",
    "run_strategies",
    # Strategy abstractions
    "BenchmarkStrategy",
    "AbstractBenchmarkStrategy",
    "StrategyResult",
    # Logging
    "configure_logging",
    "get_logger",
    # Profiling
    "ProfileStats",
    "profile_block",
]
