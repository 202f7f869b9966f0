"""
Abstract strategy interfaces and result contracts for the relational fetch benchmark.

Concrete strategies (eager load, join, lazy load, JSON aggregate) implement
the BenchmarkStrategy protocol: they read through a SQLAlchemy session and
return the records to persist. Timing and output writing are handled by the
orchestrator so every strategy is measured the same way.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Optional, Protocol, TypedDict, runtime_checkable

from pydantic import BaseModel
from sqlalchemy.orm import Session


class StrategyResult(TypedDict, total=False):
    """
    Metrics contract for a single strategy run.

    Fields are optional so a failed run can still be reported; `error` is set
    instead of `records`/`output_path` in that case.
    """

    strategy: str
    records: int
    duration_seconds: float
    output_path: Optional[str]
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]
    error: Optional[str]
    extra: Dict[str, Any]


@runtime_checkable
class BenchmarkStrategy(Protocol):
    """
    Common interface all retrieval strategies implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the access pattern.
    output_file : str
        File name the orchestrator writes this strategy's records to.
    """

    name: str
    description: str
    output_file: str

    def fetch(self, session: Session) -> List[BaseModel]:
        """
        Read jobs with their company and files using this strategy's access pattern.

        Parameters
        ----------
        session : Session
            Open session bound to the benchmark database.

        Returns
        -------
        List[BaseModel]
            Records in the strategy's output shape.
        """
        ...


class AbstractBenchmarkStrategy(abc.ABC):
    """
    ABC helper for class-based implementations.

    Subclasses set `name`, `description` and `output_file` and implement `fetch`.
    """

    name: str
    description: str
    output_file: str

    @abc.abstractmethod
    def fetch(self, session: Session) -> List[BaseModel]:  # pragma: no cover - interface only
        """Run the strategy's queries and return its records."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


__all__ = [
    "StrategyResult",
    "BenchmarkStrategy",
    "AbstractBenchmarkStrategy",
]
