from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from sqlalchemy import Engine
from sqlalchemy.exc import OperationalError

from relbench import orchestrator
from relbench.orchestrator import (
    format_duration,
    resolve_strategy_names,
    run_strategies,
)
from relbench.strategies import EagerLoadStrategy, JoinStrategy

ALL_STRATEGIES = ["eager", "join", "lazy", "json_aggregate"]
SEEDED_JOBS = 3


class _BrokenStrategy:
    name = "eager"
    description = "raises like a failed query"
    output_file = "broken_output.json"

    def fetch(self, session) -> list:
        raise OperationalError("SELECT 1", {}, Exception("server closed the connection"))


def _only(factories: Dict[str, Callable[[], Any]]) -> Callable[[], Dict[str, Callable[[], Any]]]:
    return lambda: factories


class TestResolveStrategyNames:
    def test_none_and_empty_mean_all(self):
        assert resolve_strategy_names(None) == ALL_STRATEGIES
        assert resolve_strategy_names([]) == ALL_STRATEGIES

    def test_all_subsumes_other_names(self):
        assert resolve_strategy_names(["lazy", "all"]) == ALL_STRATEGIES

    def test_explicit_selection_keeps_order_without_duplicates(self):
        assert resolve_strategy_names(["lazy", "eager", "lazy"]) == ["lazy", "eager"]

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown strategy 'bogus'"):
            resolve_strategy_names(["bogus"])


def test_format_duration():
    assert format_duration(0.0123) == "12.300ms"
    assert format_duration(2.5) == "2.500s"


class TestRunStrategies:
    def test_single_strategy_writes_its_file(self, seeded_engine: Engine, tmp_path: Path):
        results = run_strategies(["eager"], engine=seeded_engine, output_dir=tmp_path)

        assert len(results) == 1
        result = results[0]
        assert result["strategy"] == "eager"
        assert result["records"] == SEEDED_JOBS
        assert result["error"] is None
        assert result["duration_seconds"] >= 0
        output = tmp_path / "eager_load_output.json"
        assert result["output_path"] == str(output)
        assert len(json.loads(output.read_text(encoding="utf-8"))) == SEEDED_JOBS

    def test_all_runs_in_fixed_order(self, seeded_engine: Engine, tmp_path: Path):
        results = run_strategies(["all"], engine=seeded_engine, output_dir=tmp_path)

        assert [r["strategy"] for r in results] == ALL_STRATEGIES
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "eager_load_output.json",
            "join_output.json",
            "json_aggregate_output.json",
            "lazy_load_output.json",
        ]

    def test_all_logs_summary_lines_in_order(
        self, seeded_engine: Engine, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.INFO, logger="relbench.orchestrator"):
            run_strategies(None, engine=seeded_engine, output_dir=tmp_path)

        summary = [
            m
            for m in caplog.messages
            if m.startswith(("Eager Loading took", "Join took", "Lazy Loading took", "JSON Aggregate took"))
        ]
        assert [line.split(" took ")[0] for line in summary] == [
            "Eager Loading",
            "Join",
            "Lazy Loading",
            "JSON Aggregate",
        ]

    def test_single_strategy_logs_its_duration(
        self, seeded_engine: Engine, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.INFO, logger="relbench.orchestrator"):
            run_strategies(["join"], engine=seeded_engine, output_dir=tmp_path)

        assert any(m.startswith("join took ") for m in caplog.messages)
        assert not any(m.startswith("Join took ") for m in caplog.messages)

    def test_output_is_identical_across_runs(self, seeded_engine: Engine, tmp_path: Path):
        selected = ["eager", "join", "json_aggregate"]
        run_strategies(selected, engine=seeded_engine, output_dir=tmp_path / "first")
        run_strategies(selected, engine=seeded_engine, output_dir=tmp_path / "second")

        for name in ("eager_load_output.json", "join_output.json", "json_aggregate_output.json"):
            assert (tmp_path / "first" / name).read_bytes() == (tmp_path / "second" / name).read_bytes()

    def test_failure_is_fatal_by_default(
        self, seeded_engine: Engine, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(
            orchestrator,
            "_strategy_factories",
            _only({"eager": _BrokenStrategy, "join": JoinStrategy}),
        )

        with pytest.raises(OperationalError):
            run_strategies(["all"], engine=seeded_engine, output_dir=tmp_path)
        assert not (tmp_path / "join_output.json").exists()

    def test_failure_is_recorded_when_not_fail_fast(
        self, seeded_engine: Engine, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(
            orchestrator,
            "_strategy_factories",
            _only({"eager": _BrokenStrategy, "join": JoinStrategy}),
        )

        results = run_strategies(
            ["all"], engine=seeded_engine, output_dir=tmp_path, fail_fast=False
        )

        assert [r["strategy"] for r in results] == ["eager", "join"]
        assert results[0]["error"].startswith("OperationalError")
        assert results[0]["records"] == 0
        assert results[0]["output_path"] is None
        assert results[1]["error"] is None
        assert (tmp_path / "join_output.json").exists()

    def test_creates_and_disposes_engine_when_not_given(
        self, seeded_engine: Engine, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        disposed = []
        monkeypatch.setattr(orchestrator, "create_db_engine", lambda: seeded_engine)
        monkeypatch.setattr(seeded_engine, "dispose", lambda: disposed.append(True))

        results = run_strategies(["eager"], output_dir=tmp_path)

        assert results[0]["records"] == SEEDED_JOBS
        assert disposed == [True]

    def test_output_dir_defaults_to_settings(
        self, seeded_engine: Engine, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "from-env"))

        run_strategies([EagerLoadStrategy.name], engine=seeded_engine)

        assert (tmp_path / "from-env" / "eager_load_output.json").exists()

    def test_allocation_tracing_is_off_by_default(self, seeded_engine: Engine, tmp_path: Path):
        (result,) = run_strategies(["join"], engine=seeded_engine, output_dir=tmp_path)

        assert result["extra"]["peak_traced_bytes"] is None

    def test_allocation_tracing_from_settings(
        self, seeded_engine: Engine, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("TRACE_ALLOCATIONS", "true")

        (result,) = run_strategies(["join"], engine=seeded_engine, output_dir=tmp_path)

        assert result["extra"]["peak_traced_bytes"] > 0
