from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer
from sqlalchemy.exc import SQLAlchemyError

from relbench.config import get_settings
from relbench.orchestrator import available_strategies, run_strategies
from relbench.reporter import print_results
from relbench.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Relational Fetch Benchmark CLI.", add_completion=False)
log = get_logger(__name__)


def select_strategies(
    eager: bool = False,
    join: bool = False,
    lazy: bool = False,
    json_aggregate: bool = False,
    run_all: bool = False,
) -> List[str]:
    """
    Map the mode flags onto strategy names.

    `--all` wins over everything else and no flag at all also means all.
    Two or more single-strategy flags are rejected.
    """
    if run_all:
        return ["all"]
    chosen = [
        name
        for name, enabled in (
            ("eager", eager),
            ("join", join),
            ("lazy", lazy),
            ("json_aggregate", json_aggregate),
        )
        if enabled
    ]
    if len(chosen) > 1:
        raise typer.BadParameter(
            "--eager, --join, --lazy and --json are mutually exclusive; use --all to run every strategy."
        )
    return chosen or ["all"]


@app.callback(invoke_without_command=True)
def run(
    ctx: typer.Context,
    eager: bool = typer.Option(False, "--eager", help="Run the eager loading strategy."),
    join: bool = typer.Option(False, "--join", help="Run the LEFT JOIN strategy."),
    lazy: bool = typer.Option(False, "--lazy", help="Run the lazy loading (N+1) strategy."),
    json_aggregate: bool = typer.Option(
        False, "--json", help="Run the database-side JSON aggregate strategy."
    ),
    run_all: bool = typer.Option(
        False, "--all", help="Run all strategies and print a timing summary (default)."
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the *_output.json files (default from settings).",
    ),
) -> None:
    """
    Run one or all retrieval strategies and write their JSON output.
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    strategy_names = select_strategies(eager, join, lazy, json_aggregate, run_all)

    try:
        results = run_strategies(strategy_names=strategy_names, output_dir=output_dir)
    except (SQLAlchemyError, OSError, TypeError, ValueError) as exc:
        log.error(f"Benchmark aborted: {type(exc).__name__}: {exc}")
        raise typer.Exit(code=1) from exc

    print_results(results)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}:***@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"retries={settings.db_connect_retries} interval={settings.db_connect_retry_interval}s "
        f"lazy_limit={settings.lazy_load_limit} output_dir={settings.output_dir} "
        f"trace_allocations={settings.trace_allocations}"
    )


@app.command("list")
def list_strategies() -> None:
    """
    Show available strategy names in run order.
    """
    typer.echo("Available strategies: " + ", ".join(available_strategies()))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
