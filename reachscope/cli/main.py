"""
Main CLI application using Typer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from reachscope.cli.formatters import format_summary, latency_color, summary_to_dict
from reachscope.core.config import AppConfig, DEFAULT_TIMEOUT, load_config_file
from reachscope.core.models import DEFAULT_PORTS
from reachscope.core.ranker import rank
from reachscope.parallel.orchestrator import ProbeOrchestrator
from reachscope.probes.icmp import ping_ipv4
from reachscope.probes.tcp import probe_ports
from reachscope.sources import AddressSourceError, collect_addresses, fetch_github_meta
from reachscope.storage.csv_handler import CSVHandler
from reachscope.storage.logger import setup_console_logging, setup_logging
from reachscope.utils.privileges import is_admin

app = typer.Typer(
    name="reachscope",
    help="Concurrent ICMP/TCP reachability prober with latency ranking",
    add_completion=False,
)

console = Console()


def _init_context(
    output_dir: Optional[Path],
    verbose: bool,
    timeout: Optional[float] = None,
    max_workers: Optional[int] = None,
):
    """
    Initialize config and logger.
    Optional config file (~/.reachscope.yaml or ./.reachscope.yaml) supplies defaults when CLI does not set values.
    """
    file_cfg = load_config_file()
    resolved_output = output_dir if output_dir is not None else file_cfg.get("output_dir") or Path("output")
    resolved_verbose = verbose or file_cfg.get("verbose", False)
    resolved_timeout = timeout if timeout is not None else file_cfg.get("timeout")
    resolved_workers = max_workers if max_workers is not None else file_cfg.get("max_workers")

    settings = {"output_dir": resolved_output, "verbose": resolved_verbose}
    if resolved_timeout is not None:
        settings["timeout"] = resolved_timeout
    if resolved_workers is not None:
        settings["max_workers"] = resolved_workers

    try:
        config = AppConfig(**settings)
    except ValueError as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(e))}")
        raise typer.Exit(2)

    logger = setup_logging(config.output_dir, resolved_verbose)
    return config, logger


def _resolve_timeout(timeout: Optional[float]) -> float:
    """Timeout for one-off commands: flag, then config file, then the default."""
    if timeout is None:
        timeout = load_config_file().get("timeout", DEFAULT_TIMEOUT)
    if timeout <= 0:
        console.print(f"[bold red]Invalid configuration:[/bold red] timeout must be positive (got {timeout})")
        raise typer.Exit(2)
    return timeout


def _warn_if_unprivileged(logger) -> None:
    if not is_admin():
        logger.warning("Raw ICMP sockets need root/administrator privileges")
        logger.warning("If every ping fails, re-run with sudo or as administrator")


def _check_format(output_format: str) -> None:
    if output_format not in ("rich", "json"):
        console.print(f"[bold red]Unknown format:[/bold red] {output_format} (use 'rich' or 'json')")
        raise typer.Exit(2)


@app.callback(invoke_without_command=True)
def _default(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    reachscope - find the fastest reachable IPv4 hosts.
    Pings every candidate concurrently, probes ports 22/80/443 on the ones that answer and ranks them by latency.
    """
    if version:
        from reachscope import __version__
        console.print(f"reachscope {__version__}")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def probe(
    targets: Optional[List[str]] = typer.Argument(
        None,
        help="IPv4 addresses or CIDR ranges to probe (default: GitHub web ranges)",
    ),
    github: bool = typer.Option(
        False,
        "--github",
        "-g",
        help="Probe the web ranges published by the GitHub meta API",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-probe timeout in seconds (default 5)",
    ),
    max_workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Maximum concurrent probes (default: one per address)",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory for logs and results",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: 'rich' (default) or 'json'",
    ),
    save: bool = typer.Option(
        True,
        "--save/--no-save",
        help="Write results.csv and metadata.json to a run directory",
    ),
):
    """
    Probe candidate addresses and rank the reachable ones by latency.
    """
    _check_format(output_format)
    config, logger = _init_context(output_dir, verbose, timeout, max_workers)
    _warn_if_unprivileged(logger)

    entries: List[str] = list(targets or [])
    if github or not entries:
        try:
            entries.extend(fetch_github_meta(config.github_meta_url))
        except AddressSourceError as e:
            logger.error(f"Could not load GitHub address list: {e}")
            raise typer.Exit(1)

    addresses = collect_addresses(entries)
    if not addresses:
        logger.error("No valid IPv4 addresses to probe")
        raise typer.Exit(1)
    logger.info(f"Resolved {len(addresses)} IPv4 address(es)")
    logger.info("Only addresses that answer the ping get their ports probed")

    orchestrator = ProbeOrchestrator(timeout=config.timeout, max_workers=config.max_workers)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
        disable=output_format == "json",
    ) as progress:
        task_id = progress.add_task("Probing addresses", total=len(addresses))

        def _cb(completed: int, _total: int) -> None:
            progress.update(task_id, completed=completed)

        results = orchestrator.run(addresses, progress_callback=_cb)

    ranked, stats = rank(results, DEFAULT_PORTS)

    if save:
        run_dir = config.create_run_dir("probe")
        CSVHandler(run_dir / "results.csv").write_results(results)
        config.save_metadata(
            run_dir,
            {
                "addresses": len(addresses),
                "timeout": config.timeout,
                "max_workers": config.max_workers,
                "reachable": stats.reachable_count,
                "fastest": stats.fastest.address if stats.fastest else None,
            },
        )
        logger.info(f"Results saved to {run_dir}")

    if output_format == "json":
        typer.echo(json.dumps(summary_to_dict(ranked, stats), indent=2))
    else:
        format_summary(ranked, stats, console)

    if stats.all_failed:
        logger.error("No address answered the ping; check network connectivity or privileges")
        raise typer.Exit(1)

    logger.info(f"Reachable: {stats.reachable_count} of {stats.total}, fastest {stats.fastest.address}")


@app.command()
def ping(
    address: str = typer.Argument(..., help="IPv4 address"),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Timeout in seconds (default 5, or timeout from the config file)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
):
    """
    Send a single ICMP echo request.
    """
    setup_console_logging(verbose)
    timeout = _resolve_timeout(timeout)
    latency, reachable, error = ping_ipv4(address, timeout)
    if not reachable:
        console.print(f"[bold red]✗ {address}[/bold red] {escape(error or 'no reply')}")
        raise typer.Exit(1)
    latency_ms = latency * 1000
    color = latency_color(latency_ms)
    console.print(f"[bold green]✓ {address}[/bold green] [{color}]{latency_ms:.1f} ms[/{color}]")


@app.command()
def ports(
    address: str = typer.Argument(..., help="IPv4 address or hostname"),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Connect timeout in seconds (default 5, or timeout from the config file)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
):
    """
    Probe TCP ports 22, 80 and 443 on one host.
    """
    setup_console_logging(verbose)
    timeout = _resolve_timeout(timeout)
    status = probe_ports(address, DEFAULT_PORTS, timeout)
    for port, is_open in status.items():
        label = "[green]open[/green]" if is_open else "[red]closed[/red]"
        console.print(f"{address}:{port} {label}")
