from __future__ import annotations

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from relbench.orchestrator import format_duration
from relbench.strategies.abstract import StrategyResult


def print_results(results: List[StrategyResult], console: Optional[Console] = None) -> None:
    """
    Render strategy results as a rich table, in execution order.

    Failed strategies show their error in place of the output file.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="Relational Fetch Benchmark Results",
        box=box.ROUNDED,
        caption="Duration includes serialization and file write",
    )

    table.add_column("Strategy", style="cyan", no_wrap=True)
    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Duration", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")
    table.add_column("Output", style="dim")

    for res in results:
        strategy = res.get("strategy", "Unknown")
        records = f"{res.get('records', 0):,}"
        duration_str = format_duration(res.get("duration_seconds", 0.0))

        mem_bytes = res.get("peak_rss_bytes") or 0
        mem_str = f"{mem_bytes / (1024 * 1024):.2f}"

        cpu = res.get("cpu_percent") or 0.0
        cpu_str = f"{cpu:.1f}"

        if res.get("error"):
            output = f"[bold red]{escape(res['error'])}[/bold red]"
        else:
            output = escape(res.get("output_path") or "-")

        table.add_row(strategy, records, duration_str, mem_str, cpu_str, output)

    console.print(table)


__all__ = ["print_results"]
