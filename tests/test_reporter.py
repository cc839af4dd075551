"""Tests for the reporter: statistics, markdown rendering and run discovery."""

import io
from datetime import datetime, timezone

from rich.console import Console

from hotelprobe.models import CaseResult, CaseStatus, RunResult, SuiteResult
from hotelprobe.reporter import (
    compute_stats,
    list_runs,
    load_latest_run,
    render_markdown,
    render_summary,
    write_summary,
)

P, F, S = CaseStatus.PASSED, CaseStatus.FAILED, CaseStatus.SKIPPED


def _case(n, status, ms, error=None):
    return CaseResult(name=f"test_tc{n:03d}_case", title=f"TC{n:03d} - Case", status=status,
                      duration_ms=ms, error=error)


def _run(*suites, timestamp="20260101T000000Z"):
    return RunResult(timestamp=timestamp, base_url="http://hotel.test", suites=list(suites))


def _sample_run():
    return _run(
        SuiteResult("reservation_flow", "Scenario 1", exit_code=1, cases=[
            _case(1, P, 100),
            _case(2, F, 300, error="assert 500 == 200"),
            _case(3, S, 0),
        ]),
        SuiteResult("inventory_management", "Scenario 2", exit_code=0, cases=[
            _case(4, P, 50),
        ]),
    )


# --- compute_stats ---

def test_counts_and_timing():
    stats = compute_stats(_sample_run())
    assert (stats.total, stats.passed, stats.failed, stats.skipped) == (4, 2, 1, 1)
    assert stats.total_duration_ms == 450
    assert stats.average_ms == 112.5
    assert stats.success_rate == 50.0
    assert stats.exit_code == 1


def test_slowest_and_fastest():
    stats = compute_stats(_sample_run())
    assert [c.duration_ms for c in stats.slowest] == [300, 100, 50, 0]
    # fastest only considers passed cases
    assert [c.title for c in stats.fastest] == ["TC004 - Case", "TC001 - Case"]


def test_slowest_capped_at_five():
    cases = [_case(i, P, i * 10) for i in range(1, 9)]
    stats = compute_stats(_run(SuiteResult("s", "S", cases=cases)))
    assert len(stats.slowest) == 5
    assert len(stats.fastest) == 5
    assert stats.slowest[0].duration_ms == 80
    assert stats.fastest[0].duration_ms == 10


def test_empty_run():
    stats = compute_stats(_run())
    assert stats.total == 0
    assert stats.average_ms == 0.0
    assert stats.pct(stats.passed) == 0.0
    # nothing ran, so the run cannot count as a success
    assert stats.exit_code == 1


def test_timed_out_scenarios_fail_the_run():
    run = _run(
        SuiteResult("reservation_flow", "Scenario 1", exit_code=-1),
        SuiteResult("inventory_management", "Scenario 2", exit_code=-1),
    )
    stats = compute_stats(run)

    assert stats.failed == 0
    assert stats.incomplete == ["reservation_flow", "inventory_management"]
    assert stats.exit_code == 1
    assert any("2 scenario(s) did not complete" in r for r in stats.recommendations)


def test_crashed_scenario_fails_an_otherwise_green_run():
    run = _run(
        SuiteResult("reservation_flow", "Scenario 1", exit_code=0, cases=[_case(1, P, 10)]),
        # internal error after some cases were written
        SuiteResult("negative_cases", "Scenario 3", exit_code=3, cases=[_case(25, P, 10)]),
    )
    stats = compute_stats(run)

    assert stats.failed == 0
    assert stats.incomplete == ["negative_cases"]
    assert stats.exit_code == 1


def test_completed_run_has_no_incomplete_scenarios():
    stats = compute_stats(_sample_run())
    assert stats.incomplete == []
    assert not any("did not complete" in r for r in stats.recommendations)


def test_recommendations_all_good():
    stats = compute_stats(_run(SuiteResult("s", "S", exit_code=0, cases=[_case(1, P, 10)])))
    assert any("Excellent success rate (100.0%)" in r for r in stats.recommendations)
    assert any("within target" in r for r in stats.recommendations)
    assert not any("failed tests" in r for r in stats.recommendations)


def test_recommendations_slow_and_failing():
    cases = [_case(1, F, 130_000), _case(2, P, 1000)]
    recs = compute_stats(_run(SuiteResult("s", "S", cases=cases))).recommendations
    assert any("1 failed tests" in r for r in recs)
    assert any("High average time" in r for r in recs)
    assert any("Low success rate (50.0%)" in r for r in recs)
    assert any("more than 2 minutes" in r for r in recs)


# --- markdown ---

def test_render_markdown():
    run = _sample_run()
    md = render_markdown(run, compute_stats(run), generated=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert "| **Total tests** | 4 |" in md
    assert "| ✅ **Passed** | 2 (50.0%) |" in md
    assert "| ⏱️ **Total time** | 0.45s |" in md
    assert "### Scenario 1" in md
    assert "**Result:** 1/3 passed" in md
    assert "| 2 | TC002 - Case | ❌ failed | 300ms |" in md
    assert "assert 500 == 200" in md
    assert "1. **TC002 - Case** - 300ms" in md
    assert "2026-01-01 00:00 UTC" in md


def test_render_markdown_timed_out_suite():
    run = _run(SuiteResult("negative_cases", "Scenario 3", exit_code=-1))
    md = render_markdown(run, compute_stats(run))
    assert "No cases recorded" in md


def test_write_summary(tmp_path):
    path = write_summary(_sample_run(), tmp_path)
    assert path == tmp_path / "summary.md"
    assert path.read_text(encoding="utf-8").startswith("# ")


# --- console ---

def test_render_summary():
    buf = io.StringIO()
    run = _sample_run()
    render_summary(run, compute_stats(run), Console(file=buf, width=200))
    out = buf.getvalue()
    assert "TC002 - Case" in out
    assert "Total:    4" in out


def test_render_summary_names_incomplete_scenarios():
    buf = io.StringIO()
    run = _run(SuiteResult("negative_cases", "Scenario 3", exit_code=-1))
    render_summary(run, compute_stats(run), Console(file=buf, width=200))
    out = buf.getvalue()
    assert "Scenario did not complete: negative_cases" in out
    assert "No test cases recorded" in out


# --- run discovery ---

def test_load_latest_run(tmp_path):
    _run(timestamp="20260101T000000Z").save(tmp_path / "20260101T000000Z")
    _run(timestamp="20260102T000000Z").save(tmp_path / "20260102T000000Z")
    (tmp_path / "20260103T000000Z").mkdir()  # interrupted run, no results.json

    result, run_dir = load_latest_run(tmp_path)
    assert result.timestamp == "20260102T000000Z"
    assert run_dir.name == "20260102T000000Z"


def test_load_latest_run_missing_dir(tmp_path):
    assert load_latest_run(tmp_path / "nothing") is None


def test_list_runs(tmp_path):
    _sample_run().save(tmp_path / "20260101T000000Z")
    buf = io.StringIO()
    list_runs(tmp_path, Console(file=buf, width=200))
    out = buf.getvalue()
    assert "20260101T000000Z" in out
    assert "2/4" in out
