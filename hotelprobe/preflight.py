"""Global setup and teardown around a run.

Setup runs once before any scenario: it checks that the API answers and
makes sure the test user exists (login first, register if that fails).
Teardown prints where the results ended up.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import httpx
from rich.console import Console
from rich.panel import Panel

from hotelprobe.client import ApiClient
from hotelprobe.config import Settings


class PreflightError(Exception):
    """The API is not reachable or not answering the health check."""


def global_setup(
    settings: Settings,
    console: Console,
    transport: Optional[httpx.BaseTransport] = None,
) -> bool:
    """Verify API availability and provision the test user.

    Returns True if the test user can log in after setup. Raises
    PreflightError if the API is down.
    """
    console.print(Panel.fit("[bold]Global test setup[/bold]", border_style="cyan"))
    console.print(f"  Base URL: {settings.base_url}")
    console.print(f"  Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    with ApiClient(settings, transport=transport, console=console) as api:
        console.print("  Checking API availability...")
        try:
            health = api.check_admin_registration_status()
        except httpx.HTTPError as e:
            raise PreflightError(f"API not reachable at {settings.base_url}: {e}") from e

        if not health.is_success:
            raise PreflightError(f"API not available. Status: {health.status_code}")
        console.print("  [green]API available[/green]")

        try:
            can_register = health.json()
        except ValueError:
            can_register = health.text
        console.print(f"  Admin registration allowed: {can_register}")

        console.print("  Setting up test user...")
        login = api.login(settings.username, settings.password)
        if login.is_success:
            console.print(f"  [green]Existing test user:[/green] {settings.username}")
            return True

        console.print(f"  Creating test user: {settings.username}")
        register = api.register(settings.username, settings.password)
        if register.is_success:
            console.print("  [green]Test user created[/green]")
            return True

        console.print(
            f"  [yellow]Could not create test user (status {register.status_code}); "
            f"continuing with the configured credentials[/yellow]"
        )
        return False


def global_teardown(console: Console, run_dir: Path) -> None:
    """Print the closing banner for a run."""
    console.print()
    console.print(Panel.fit("[bold]Run finished[/bold]", border_style="cyan"))
    console.print(f"  Finished: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    console.print(f"  Results: {run_dir}")
    console.print("  [dim]python -m hotelprobe report    # regenerate the summary[/dim]")
    console.print("  [dim]python -m hotelprobe results   # list stored runs[/dim]")
