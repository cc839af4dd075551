"""Hotelprobe runner: orchestrates preflight → scenarios → results.json.

Data flow per run:
1. Global setup: API health check, test user login-or-register
2. Create a timestamped run directory under the results dir
3. For each scenario, in ORDER: run its pytest module in a subprocess with
   the fixtures plugin, writing junit.xml and pytest-output.txt
4. Parse each junit.xml into CaseResults
5. Assemble RunResult, save as results.json
6. Global teardown banner

Scenarios never run in parallel: cases depend on IDs created by earlier
cases, and the server database is shared.
"""

from __future__ import annotations

import subprocess
import sys
import time
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console

from hotelprobe.config import Settings
from hotelprobe.environment import build_run_env
from hotelprobe.models import CaseResult, CaseStatus, RunResult, SuiteResult, case_title
from hotelprobe.preflight import global_setup, global_teardown
from hotelprobe.scenarios import ScenarioInfo, list_scenarios, load_scenario

FIXTURES_PLUGIN = "hotelprobe.scenarios.fixtures"


def _new_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")


def _ensure_run_dir(settings: Settings, timestamp: str) -> Path:
    """Create and return the absolute <results_dir>/<timestamp>/ path.

    Raises FileExistsError rather than reusing another run's directory.
    """
    results_dir = settings.results_dir.resolve()
    results_dir.mkdir(parents=True, exist_ok=True)
    run_dir = results_dir / timestamp
    run_dir.mkdir()
    return run_dir


def build_pytest_command(scenario: ScenarioInfo, junit_path: Path, retries: int = 0) -> list[str]:
    """Build the pytest command line for one scenario."""
    cmd = [
        sys.executable, "-m", "pytest", str(scenario.tests_dir),
        "-p", FIXTURES_PLUGIN,
        "-p", "no:cacheprovider",
        "--rootdir", str(scenario.path),
        "-v", "--tb=short",
        f"--junitxml={junit_path}",
        "-o", f"junit_suite_name={scenario.name}",
        "-o", "junit_logging=system-out",
    ]
    if retries > 0:
        cmd.extend(["--reruns", str(retries)])
    return cmd


def _case_error(element: ET.Element) -> str:
    """Message of a <failure>/<error> element, falling back to its text."""
    message = element.get("message") or ""
    text = (element.text or "").strip()
    if message and text:
        return f"{message}\n{text}"
    return message or text


def parse_junit(path: Path) -> list[CaseResult]:
    """Parse a pytest JUnit XML file into CaseResults, in document order."""
    root = ET.parse(path).getroot()
    cases: list[CaseResult] = []
    for tc in root.iter("testcase"):
        name = tc.get("name", "")
        duration_ms = int(round(float(tc.get("time") or 0) * 1000))

        status = CaseStatus.PASSED
        error = None
        for child in tc:
            if child.tag in ("failure", "error"):
                status = CaseStatus.FAILED
                error = _case_error(child)
                break
            if child.tag == "skipped":
                status = CaseStatus.SKIPPED
                error = child.get("message") or None

        cases.append(CaseResult(
            name=name,
            title=case_title(name),
            status=status,
            duration_ms=duration_ms,
            error=error,
        ))
    return cases


def run_scenario(
    scenario_name: str,
    console: Console,
    settings: Settings,
    run_dir: Path,
) -> SuiteResult:
    """Execute one scenario's pytest module and collect its results.

    Args:
        scenario_name: Name of the scenario (e.g., 'reservation_flow').
        console: Rich Console for status output.
        settings: Resolved settings passed to the subprocess environment.
        run_dir: Run directory; the scenario writes into run_dir/<name>/.

    Returns:
        SuiteResult with one CaseResult per executed case.
    """
    scenario = load_scenario(scenario_name)
    if not scenario:
        console.print(f"[red]Error:[/red] Unknown scenario: {scenario_name}")
        return SuiteResult(scenario=scenario_name, title=scenario_name)

    console.print(f"\n[bold]Running:[/bold] {scenario.title}")
    console.print(f"  Timeout: {scenario.timeout_s}s")

    scenario_dir = run_dir / scenario.name
    scenario_dir.mkdir(parents=True, exist_ok=True)
    junit_path = scenario_dir / "junit.xml"
    output_path = scenario_dir / "pytest-output.txt"

    suite = SuiteResult(scenario=scenario.name, title=scenario.title, output_path=str(output_path))

    start = time.monotonic()
    try:
        proc = subprocess.run(
            build_pytest_command(scenario, junit_path, settings.retries),
            cwd=scenario.path,
            env=build_run_env(settings),
            capture_output=True,
            text=True,
            timeout=scenario.timeout_s,
        )
        suite.exit_code = proc.returncode
        output_path.write_text(proc.stdout + "\n" + proc.stderr, encoding="utf-8")
    except subprocess.TimeoutExpired:
        output_path.write_text(f"TIMEOUT after {scenario.timeout_s}s", encoding="utf-8")
        console.print(f"  [red]TIMEOUT[/red] after {scenario.timeout_s}s")
    except FileNotFoundError:
        output_path.write_text("pytest not found", encoding="utf-8")
        console.print("  [red]pytest not found[/red]")
    suite.wall_clock_s = round(time.monotonic() - start, 1)

    if junit_path.exists():
        try:
            suite.cases = parse_junit(junit_path)
        except ET.ParseError as e:
            console.print(f"  [red]Unreadable junit.xml:[/red] {e}")

    color = {"pass": "green", "partial": "yellow"}.get(suite.verdict, "red")
    console.print(
        f"  Result: {suite.passed}/{len(suite.cases)} passed "
        f"([{color}]{suite.verdict}[/{color}]) in {suite.wall_clock_s}s"
    )
    return suite


def run_all(
    console: Console,
    settings: Settings,
    names: Optional[list[str]] = None,
    skip_preflight: bool = False,
) -> tuple[RunResult, Path]:
    """Run scenarios sequentially in their declared order.

    Args:
        names: Scenario names to run; None runs every discovered scenario.
        skip_preflight: Skip the API health check and test user setup.

    Returns:
        (RunResult, run_dir). Raises PreflightError if the API is down.
    """
    if names is None:
        names = [s.name for s in list_scenarios()]

    if not skip_preflight:
        global_setup(settings, console)

    timestamp = _new_timestamp()
    run_dir = _ensure_run_dir(settings, timestamp)

    result = RunResult(timestamp=timestamp, base_url=settings.base_url)
    start = time.monotonic()
    for name in names:
        result.suites.append(run_scenario(name, console, settings, run_dir))
    result.wall_clock_s = round(time.monotonic() - start, 1)

    result.save(run_dir)
    console.print(f"\n  [bold green]Done.[/bold green] Results saved to {run_dir / 'results.json'}")

    global_teardown(console, run_dir)
    return result, run_dir
