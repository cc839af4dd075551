"""Hotelprobe reporter: loads run results, renders Rich tables, writes summary.md.

Pure data transformation over a RunResult: pass/fail/skip counts, timing
aggregates, slowest and fastest cases, and a short list of recommendations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from hotelprobe.models import CaseResult, CaseStatus, RunResult

SUMMARY_FILE = "summary.md"

# Thresholds for recommendations
TARGET_SUCCESS_RATE = 95.0
SLOW_AVERAGE_MS = 2000
SLOW_SUITE_MS = 120_000

_STATUS_ICONS = {
    CaseStatus.PASSED: "✅",
    CaseStatus.FAILED: "❌",
    CaseStatus.SKIPPED: "⏭️",
}

_STATUS_COLORS = {
    CaseStatus.PASSED: "green",
    CaseStatus.FAILED: "red",
    CaseStatus.SKIPPED: "yellow",
}


@dataclass
class ReportStats:
    """Aggregates over every case of a run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    total_duration_ms: int = 0
    slowest: list[CaseResult] = field(default_factory=list)
    fastest: list[CaseResult] = field(default_factory=list)
    incomplete: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def pct(self, n: int) -> float:
        return (n / self.total) * 100 if self.total else 0.0

    @property
    def success_rate(self) -> float:
        return self.pct(self.passed)

    @property
    def average_ms(self) -> float:
        return self.total_duration_ms / self.total if self.total else 0.0

    @property
    def exit_code(self) -> int:
        """Non-zero unless every scenario finished and recorded no failures."""
        return 1 if self.failed > 0 or self.incomplete or self.total == 0 else 0


def _recommendations(stats: ReportStats) -> list[str]:
    recs: list[str] = []
    if stats.incomplete:
        recs.append(
            f"⚠️ {len(stats.incomplete)} scenario(s) did not complete: {', '.join(stats.incomplete)}. "
            "Check pytest-output.txt for timeouts or crashes."
        )
    if stats.failed > 0:
        recs.append(f"⚠️ {stats.failed} failed tests detected. Review the detailed logs.")
    if stats.average_ms > SLOW_AVERAGE_MS:
        recs.append(f"⚠️ High average time ({stats.average_ms:.0f}ms). Consider optimization.")
    if stats.success_rate < TARGET_SUCCESS_RATE:
        recs.append(f"⚠️ Low success rate ({stats.success_rate:.1f}%). Target: >{TARGET_SUCCESS_RATE:.0f}%")
    else:
        recs.append(f"✅ Excellent success rate ({stats.success_rate:.1f}%)")
    if stats.total_duration_ms > SLOW_SUITE_MS:
        recs.append("⚠️ Test suite takes more than 2 minutes.")
    else:
        recs.append("✅ Execution time within target (<2 min)")
    return recs


def compute_stats(run: RunResult) -> ReportStats:
    """Compute counts, timing aggregates and recommendations for a run."""
    cases = run.cases
    stats = ReportStats(
        total=len(cases),
        passed=sum(1 for c in cases if c.status == CaseStatus.PASSED),
        failed=sum(1 for c in cases if c.status == CaseStatus.FAILED),
        skipped=sum(1 for c in cases if c.status == CaseStatus.SKIPPED),
        total_duration_ms=sum(c.duration_ms for c in cases),
        incomplete=[s.scenario for s in run.suites if not s.completed],
    )
    stats.slowest = sorted(cases, key=lambda c: c.duration_ms, reverse=True)[:5]
    stats.fastest = sorted(
        (c for c in cases if c.status == CaseStatus.PASSED),
        key=lambda c: c.duration_ms,
    )[:5]
    stats.recommendations = _recommendations(stats)
    return stats


# ---------------------------------------------------------------------------
# Markdown report generation
# ---------------------------------------------------------------------------

def render_markdown(run: RunResult, stats: ReportStats, generated: Optional[datetime] = None) -> str:
    """Render the full markdown summary for a run."""
    generated = generated or datetime.now(timezone.utc)

    lines: list[str] = []
    lines.append("# 📊 Automated Test Report - Hotel API")
    lines.append("")
    lines.append("## Executive Summary")
    lines.append("")
    lines.append(f"**Run:** `{run.timestamp}`  ")
    lines.append(f"**Target:** {run.base_url or '--'}  ")
    lines.append(f"**Generated:** {generated.strftime('%Y-%m-%d %H:%M UTC')}")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Total tests** | {stats.total} |")
    lines.append(f"| ✅ **Passed** | {stats.passed} ({stats.pct(stats.passed):.1f}%) |")
    lines.append(f"| ❌ **Failed** | {stats.failed} ({stats.pct(stats.failed):.1f}%) |")
    lines.append(f"| ⏭️ **Skipped** | {stats.skipped} ({stats.pct(stats.skipped):.1f}%) |")
    lines.append(f"| ⏱️ **Total time** | {stats.total_duration_ms / 1000:.2f}s |")
    lines.append(f"| ⚡ **Average time** | {stats.average_ms:.0f}ms |")
    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append("## 📈 Results by Scenario")
    lines.append("")

    for suite in run.suites:
        lines.append(f"### {suite.title or suite.scenario}")
        lines.append("")
        lines.append(f"**Result:** {suite.passed}/{len(suite.cases)} passed")
        lines.append("")
        if not suite.cases:
            lines.append(f"No cases recorded (timed out or crashed, exit code {suite.exit_code}).")
            lines.append("")
            continue

        lines.append("| # | Test Case | Status | Time |")
        lines.append("|---|-----------|--------|------|")
        for i, case in enumerate(suite.cases, 1):
            icon = _STATUS_ICONS[case.status]
            lines.append(f"| {i} | {case.title} | {icon} {case.status.value} | {case.duration_ms}ms |")
        lines.append("")

        errors = [c for c in suite.cases if c.status == CaseStatus.FAILED and c.error]
        if errors:
            lines.append("#### ❌ Errors found:")
            lines.append("")
            for case in errors:
                lines.append(f"**{case.title}**")
                lines.append("```")
                lines.append(case.error)
                lines.append("```")
                lines.append("")

    lines.append("---")
    lines.append("")
    lines.append("## ⚡ Performance Analysis")
    lines.append("")
    lines.append("### Slowest tests:")
    lines.append("")
    for i, case in enumerate(stats.slowest, 1):
        lines.append(f"{i}. **{case.title}** - {case.duration_ms}ms")
    lines.append("")
    lines.append("### Fastest tests:")
    lines.append("")
    for i, case in enumerate(stats.fastest, 1):
        lines.append(f"{i}. **{case.title}** - {case.duration_ms}ms")
    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append("## 💡 Recommendations")
    lines.append("")
    for rec in stats.recommendations:
        lines.append(f"- {rec}")

    return "\n".join(lines) + "\n"


def write_summary(run: RunResult, run_dir: Path) -> Path:
    """Write summary.md into the run directory and return its path."""
    out = run_dir / SUMMARY_FILE
    out.write_text(render_markdown(run, compute_stats(run)), encoding="utf-8")
    return out


# ---------------------------------------------------------------------------
# Console rendering
# ---------------------------------------------------------------------------

def render_summary(run: RunResult, stats: ReportStats, console: Console) -> None:
    """Render a Rich table of every case plus the totals."""
    for name in stats.incomplete:
        console.print(f"[red]Scenario did not complete:[/red] {name}")
    if not stats.total:
        console.print(f"[yellow]No test cases recorded for run: {run.timestamp}[/yellow]")
        return

    table = Table(title=f"Run: {run.timestamp}", show_header=True, header_style="bold")
    table.add_column("Scenario", style="dim", min_width=16)
    table.add_column("Test case", min_width=30)
    table.add_column("Status", justify="center")
    table.add_column("Time", justify="right")

    for suite in run.suites:
        for case in suite.cases:
            color = _STATUS_COLORS[case.status]
            table.add_row(
                suite.scenario,
                case.title,
                f"[{color}]{case.status.value}[/{color}]",
                f"{case.duration_ms}ms",
            )

    console.print()
    console.print(table)
    console.print()
    console.print("=" * 60)
    console.print("[bold]TEST SUMMARY[/bold]")
    console.print("=" * 60)
    console.print(f"Total:    {stats.total}")
    console.print(f"[green]Passed:[/green]   {stats.passed} ({stats.pct(stats.passed):.1f}%)")
    console.print(f"[red]Failed:[/red]   {stats.failed} ({stats.pct(stats.failed):.1f}%)")
    console.print(f"Time:     {stats.total_duration_ms / 1000:.2f}s")
    console.print("=" * 60)


# ---------------------------------------------------------------------------
# Run discovery
# ---------------------------------------------------------------------------

def load_latest_run(results_dir: Path) -> Optional[tuple[RunResult, Path]]:
    """Find the most recent run with a readable results.json.

    Run directories are UTC timestamps and sort lexicographically.
    """
    if not results_dir.is_dir():
        return None
    for run_dir in sorted(results_dir.iterdir(), reverse=True):
        if not run_dir.is_dir():
            continue
        result = RunResult.load(run_dir)
        if result:
            return result, run_dir
    return None


def list_runs(results_dir: Path, console: Console) -> None:
    """List all stored runs, newest first."""
    if not results_dir.is_dir():
        console.print("[yellow]No results yet. Run the scenarios first.[/yellow]")
        return

    for run_dir in sorted(results_dir.iterdir(), reverse=True):
        if not run_dir.is_dir():
            continue
        result = RunResult.load(run_dir)
        if not result:
            continue
        stats = compute_stats(result)
        verdict = "fail" if stats.exit_code else "pass"
        console.print(
            f"  {run_dir.name}  {verdict:5s} {stats.passed}/{stats.total:<4d}"
            f" {result.wall_clock_s:>7.1f}s  {result.base_url}"
        )
