"""
Orchestrator for running retrieval strategies, profiling them and writing their output.

Usage (example from CLI):
    from relbench.orchestrator import run_strategies

    results = run_strategies(strategy_names=["eager", "join"])
    print(results)

Every strategy writes its records to its own file in the output directory
(current working directory by default), e.g. `eager_load_output.json`.
Strategies run one after another on a single engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from relbench.config import get_settings
from relbench.infrastructure.db_factory import create_db_engine
from relbench.strategies.abstract import BenchmarkStrategy, StrategyResult
from relbench.strategies.eager_load import EagerLoadStrategy
from relbench.strategies.join import JoinStrategy
from relbench.strategies.json_aggregate import JsonAggregateStrategy
from relbench.strategies.lazy_load import LazyLoadStrategy
from relbench.utils.logging import get_logger
from relbench.utils.profiler import ProfileStats, profile_block
from relbench.writer import write_records

log = get_logger(__name__)

# Labels for the end-of-run summary, in registry order.
SUMMARY_LABELS: Dict[str, str] = {
    "eager": "Eager Loading",
    "join": "Join",
    "lazy": "Lazy Loading",
    "json_aggregate": "JSON Aggregate",
}


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _strategy_factories() -> Dict[str, Callable[[], BenchmarkStrategy]]:
    """Registry of available strategies; insertion order is the run-all order."""
    return {
        "eager": lambda: EagerLoadStrategy(),
        "join": lambda: JoinStrategy(),
        "lazy": lambda: LazyLoadStrategy(),
        "json_aggregate": lambda: JsonAggregateStrategy(),
    }


def available_strategies() -> List[str]:
    """List available strategy names in run-all order."""
    return list(_strategy_factories().keys())


def _resolve_strategy(name: str) -> BenchmarkStrategy:
    factories = _strategy_factories()
    if name not in factories:
        raise ValueError(f"Unknown strategy '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


def resolve_strategy_names(strategy_names: Optional[Iterable[str]]) -> List[str]:
    """
    Expand a strategy selection into the names to run.

    None, an empty selection or any selection containing "all" runs every
    strategy in registry order. Unknown names raise ValueError.
    """
    names = list(strategy_names) if strategy_names is not None else []
    if not names or "all" in names:
        return available_strategies()
    factories = _strategy_factories()
    unknown = [name for name in names if name not in factories]
    if unknown:
        raise ValueError(
            f"Unknown strategy '{unknown[0]}'. Available: {', '.join(factories)}"
        )
    return list(dict.fromkeys(names))


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.3f}ms"
    return f"{seconds:.3f}s"


def _merge_result(
    name: str,
    records: Optional[int],
    output_path: Optional[Path],
    stats: ProfileStats,
    error: Optional[str] = None,
) -> StrategyResult:
    """Combine a strategy outcome with profiler stats, rounding floats for readability."""
    result = StrategyResult(
        strategy=name,
        records=records or 0,
        duration_seconds=_round_float(stats.duration_seconds, 4),
        output_path=str(output_path) if output_path is not None else None,
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=_round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
        error=error,
    )
    result["extra"] = {
        "peak_traced_bytes": stats.peak_traced_bytes,
        "elapsed_seconds": stats.duration_seconds,
    }
    return result


def _profiled_execute(
    strategy: BenchmarkStrategy,
    engine: Engine,
    output_dir: Path,
    fail_fast: bool,
    trace_allocations: bool = False,
) -> StrategyResult:
    """
    Run one strategy and write its output, timing both together.

    With `fail_fast` the first error propagates to the caller; otherwise it
    is logged and recorded in the result's `error` field. tracemalloc runs
    inside the timed block only when `trace_allocations` is set.
    """
    log.info(f"[STRATEGY START] {strategy.name}", extra={"strategy": strategy.name})
    target = output_dir / strategy.output_file
    records: Optional[int] = None
    written: Optional[Path] = None
    error: Optional[str] = None

    with profile_block(strategy.name, enable_tracemalloc=trace_allocations) as stats:
        try:
            with Session(engine) as session:
                rows = strategy.fetch(session)
            written = write_records(rows, target)
            records = len(rows)
        except Exception as exc:
            if fail_fast:
                raise
            log.exception(f"[STRATEGY FAILED] {strategy.name}", extra={"strategy": strategy.name})
            error = f"{type(exc).__name__}: {exc}"

    if error is None:
        log.info(
            f"{strategy.name} took {format_duration(stats.duration_seconds)}",
            extra={"strategy": strategy.name, "records": records, "output": str(written)},
        )
    return _merge_result(strategy.name, records, written, stats, error)


def run_strategies(
    strategy_names: Optional[Iterable[str]] = None,
    engine: Optional[Engine] = None,
    output_dir: Path | str | None = None,
    fail_fast: bool = True,
) -> List[StrategyResult]:
    """
    Run one or more strategies sequentially and write each one's output file.

    Parameters
    ----------
    strategy_names : iterable[str] | None
        Strategy names to execute. None, empty or containing "all" runs all.
    engine : Engine | None
        Engine to query through. When omitted one is created with connection
        retries and disposed after the run.
    output_dir : Path | str | None
        Directory for the output files. Defaults to settings.output_dir.
    fail_fast : bool
        Re-raise the first error instead of recording it and moving on.

    Returns
    -------
    List[StrategyResult]
        One result per executed strategy, in execution order.
    """
    settings = get_settings()
    names = resolve_strategy_names(strategy_names)
    target_dir = Path(output_dir) if output_dir is not None else settings.output_dir

    owns_engine = engine is None
    if engine is None:
        engine = create_db_engine()

    results: List[StrategyResult] = []
    try:
        for name in names:
            strategy = _resolve_strategy(name)
            result = _profiled_execute(
                strategy, engine, target_dir, fail_fast, settings.trace_allocations
            )
            results.append(result)
    finally:
        if owns_engine:
            engine.dispose()

    if len(results) > 1:
        for result in results:
            label = SUMMARY_LABELS.get(result["strategy"], result["strategy"])
            log.info(
                f"{label} took {format_duration(result['extra']['elapsed_seconds'])}",
                extra={"strategy": result["strategy"], "error": result.get("error")},
            )

    failed = [r["strategy"] for r in results if r.get("error")]
    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(results) - len(failed)}/{len(results)} strategies succeeded",
        extra={"strategies": names, "failed": failed},
    )
    return results


__all__ = [
    "SUMMARY_LABELS",
    "available_strategies",
    "format_duration",
    "resolve_strategy_names",
    "run_strategies",
]
