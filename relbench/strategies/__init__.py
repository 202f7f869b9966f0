"""
Strategies package for the relational fetch benchmark.

This module re-exports the abstract interfaces and the concrete strategy classes
so downstream code can import from `relbench.strategies` directly.
"""

from relbench.strategies.abstract import (
    AbstractBenchmarkStrategy,
    BenchmarkStrategy,
    StrategyResult,
)
from relbench.strategies.eager_load import EagerLoadStrategy
from relbench.strategies.join import JoinStrategy
from relbench.strategies.json_aggregate import JsonAggregateStrategy
from relbench.strategies.lazy_load import LazyLoadStrategy

__all__ = [
    # Abstracts
    "AbstractBenchmarkStrategy",
    "BenchmarkStrategy",
    "StrategyResult",
    # Concrete strategies
    "EagerLoadStrategy",
    "JoinStrategy",
    "JsonAggregateStrategy",
    "LazyLoadStrategy",
]
