"""CLI for the hotelprobe end-to-end API harness.

Usage:
    python -m hotelprobe list                          # Show available scenarios
    python -m hotelprobe preflight                     # Health check + test user only
    python -m hotelprobe run --all                     # Every scenario, in order
    python -m hotelprobe run reservation_flow          # Single scenario
    python -m hotelprobe report                        # Summary for the latest run
    python -m hotelprobe results                       # List stored runs
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from hotelprobe.config import ConfigError, Settings, load_settings
from hotelprobe.models import RunResult
from hotelprobe.preflight import PreflightError, global_setup
from hotelprobe.reporter import compute_stats, list_runs, load_latest_run, render_summary, write_summary
from hotelprobe.runner import run_all
from hotelprobe.scenarios import list_scenarios, load_scenario

app = typer.Typer(
    name="hotelprobe",
    help="End-to-end test harness for the hotel management API",
    no_args_is_help=True,
)
console = Console(stderr=True)


def _settings(base_url: Optional[str] = None) -> Settings:
    try:
        return load_settings().with_overrides(base_url=base_url)
    except ConfigError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1)


@app.command("list")
def cmd_list() -> None:
    """Show available scenarios."""
    scenarios = list_scenarios()
    if not scenarios:
        console.print("[yellow]No scenarios found.[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Available Scenarios", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name", style="green", min_width=15)
    table.add_column("Description", min_width=30)
    table.add_column("Tests", justify="right")
    table.add_column("Timeout", justify="right")

    for s in scenarios:
        table.add_row(str(s.order), s.name, s.description, str(s.total_tests), f"{s.timeout_s}s")

    console.print()
    console.print(table)
    console.print()


@app.command("preflight")
def cmd_preflight(
    base_url: Optional[str] = typer.Option(None, "--base-url", "-u", help="Override API_BASE_URL"),
) -> None:
    """Check the API is up and the test user exists."""
    settings = _settings(base_url)
    try:
        global_setup(settings, console)
    except PreflightError as e:
        console.print(f"[red]Preflight failed:[/red] {e}")
        raise typer.Exit(1)


@app.command("run")
def cmd_run(
    scenario: Optional[str] = typer.Argument(None, help="Scenario name (e.g., 'reservation_flow')"),
    all_scenarios: bool = typer.Option(False, "--all", "-a", help="Run every scenario in order"),
    base_url: Optional[str] = typer.Option(None, "--base-url", "-u", help="Override API_BASE_URL"),
    skip_preflight: bool = typer.Option(False, "--skip-preflight", help="Skip health check and test user setup"),
) -> None:
    """Run one scenario or all of them, then write the summary."""
    if all_scenarios:
        names = None
    elif scenario:
        if not load_scenario(scenario):
            console.print(f"[red]Unknown scenario: {scenario}[/red]. See `hotelprobe list`.")
            raise typer.Exit(1)
        names = [scenario]
    else:
        console.print("[red]Specify a scenario or --all[/red]")
        raise typer.Exit(1)

    settings = _settings(base_url)
    try:
        result, run_dir = run_all(console, settings, names=names, skip_preflight=skip_preflight)
    except PreflightError as e:
        console.print(f"[red]Preflight failed:[/red] {e}")
        console.print("[yellow]Tests were not run; check that the API is available.[/yellow]")
        raise typer.Exit(1)

    stats = compute_stats(result)
    render_summary(result, stats, console)
    path = write_summary(result, run_dir)
    console.print(f"\nDetailed report saved to {path}")
    raise typer.Exit(stats.exit_code)


@app.command("report")
def cmd_report(
    run_dir: Optional[Path] = typer.Argument(None, help="Run directory (defaults to the latest run)"),
) -> None:
    """Generate summary.md for a run."""
    if run_dir is not None:
        result = RunResult.load(run_dir)
    else:
        latest = load_latest_run(_settings().results_dir)
        result, run_dir = latest if latest else (None, None)

    if result is None:
        console.print("[yellow]No results found. Run the scenarios first.[/yellow]")
        raise typer.Exit(1)

    stats = compute_stats(result)
    render_summary(result, stats, console)
    path = write_summary(result, run_dir)
    console.print(f"\nDetailed report saved to {path}")
    raise typer.Exit(stats.exit_code)


@app.command("results")
def cmd_results() -> None:
    """List all stored runs."""
    list_runs(_settings().results_dir, console)


if __name__ == "__main__":
    app()
