"""
Rich formatting utilities for CLI output.
"""

from typing import Any, Dict, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from reachscope.core.models import DEFAULT_PORTS, ProbeResult, ProbeStats

# Latency thresholds in milliseconds
LATENCY_FAST_MS = 100.0
LATENCY_SLOW_MS = 300.0


def latency_color(latency_ms: float) -> str:
    """Map a latency to a display color."""
    if latency_ms > LATENCY_SLOW_MS:
        return "red"
    if latency_ms > LATENCY_FAST_MS:
        return "yellow"
    return "green"


def _port_cell(result: ProbeResult, port: int) -> str:
    if port not in result.port_status:
        return "[dim]-[/dim]"
    if result.port_status[port]:
        return "[green]open[/green]"
    return "[red]closed[/red]"


def build_results_table(
    ranked: Sequence[ProbeResult],
    ports: Sequence[int] = DEFAULT_PORTS,
) -> Table:
    """Build the latency-ranked results table."""
    table = Table(title="Probe Results", show_header=True, header_style="bold green")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Address", style="cyan")
    table.add_column("Latency", justify="right")
    for port in ports:
        table.add_column(f"Port {port}", justify="center")

    for position, result in enumerate(ranked, start=1):
        color = latency_color(result.latency_ms)
        table.add_row(
            str(position),
            result.address,
            f"[{color}]{result.latency_ms:.1f} ms[/{color}]",
            *(_port_cell(result, port) for port in ports),
        )
    return table


def format_stats(stats: ProbeStats, console: Console) -> None:
    """Display aggregate statistics."""
    content: list[str] = []
    content.append(f"[bold]Reachable:[/bold] {stats.reachable_count} of {stats.total}")
    for port, count in sorted(stats.open_counts.items()):
        content.append(f"[bold]Port {port} open:[/bold] {count}")
    if stats.fastest is not None:
        content.append(
            f"\n[bold green]Fastest:[/bold green] {stats.fastest.address} "
            f"({stats.fastest.latency_ms:.1f} ms)"
        )

    console.print()
    console.print(Panel("\n".join(content), title="Statistics", border_style="cyan", expand=False))


def format_summary(
    ranked: Sequence[ProbeResult],
    stats: ProbeStats,
    console: Console,
    ports: Sequence[int] = DEFAULT_PORTS,
) -> None:
    """Display the ranked table and statistics, or an error panel if nothing answered."""
    if stats.all_failed:
        console.print()
        console.print(
            Panel(
                f"None of the {stats.total} address(es) answered the ICMP echo.\n"
                "Check network connectivity, or run with root/administrator privileges.",
                title="✗ No reachable addresses",
                border_style="red",
                expand=False,
            )
        )
        return

    console.print()
    console.print(build_results_table(ranked, ports))
    format_stats(stats, console)


def summary_to_dict(ranked: Sequence[ProbeResult], stats: ProbeStats) -> Dict[str, Any]:
    """JSON-serializable view of a ranked run."""
    return {
        "ranked": [r.model_dump(mode="json") for r in ranked],
        "stats": stats.model_dump(mode="json"),
    }
