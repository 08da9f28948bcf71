from __future__ import annotations

from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def build_results_table(result: Dict[str, Any]) -> Table:
    """
    Build a rich table with one row per worker plus a totals row.
    """
    title = f"Insert Load Results: {result.get('namespace', '?')}"

    mem_bytes = result.get("peak_rss_bytes") or 0
    cpu = result.get("cpu_percent") or 0.0
    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"Peak memory {mem_bytes / (1024 * 1024):.2f} MB │ CPU {cpu:.1f}%",
    )

    table.add_column("Worker", style="cyan", no_wrap=True)
    table.add_column("Inserts", justify="right", style="magenta")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Throughput (inserts/s)", justify="right", style="bold green")

    for worker in result.get("workers", []):
        table.add_row(
            worker["worker_id"],
            f"{worker['inserts']:,}",
            f"{worker['duration_seconds']:.1f}",
            f"{worker['throughput_inserts_per_sec']:,.2f}",
        )

    table.add_section()
    table.add_row(
        "[bold]total[/bold]",
        f"{result.get('total_inserts', 0):,}",
        f"{result.get('duration_seconds', 0.0):.1f}",
        f"{result.get('throughput_inserts_per_sec', 0.0):,.2f}",
    )
    return table


def print_results(result: Dict[str, Any], console: Optional[Console] = None) -> None:
    """
    Render a load result as a rich table.
    """
    console = console or Console()
    if not result.get("workers"):
        console.print("[yellow]No results to display.[/yellow]")
        return
    console.print(build_results_table(result))


__all__ = ["build_results_table", "print_results"]
