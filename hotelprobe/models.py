"""Data models for hotelprobe runs.

CaseStatus, CaseResult, SuiteResult, RunResult: the typed structures that
flow through runner → reporter → CLI. A RunResult is persisted as
results.json in its run directory.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

RESULTS_FILE = "results.json"

_CASE_ID = re.compile(r"^test_(tc\d+)_?(.*)$", re.IGNORECASE)


class CaseStatus(str, Enum):
    """Outcome of a single test case."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


def case_title(name: str) -> str:
    """Turn a pytest function name into a readable case title.

    'test_tc001_admin_registration_status' → 'TC001 - Admin registration status'
    """
    m = _CASE_ID.match(name)
    if not m:
        return name.removeprefix("test_").replace("_", " ").strip().capitalize() or name
    case_id, rest = m.group(1).upper(), m.group(2).replace("_", " ").strip()
    return f"{case_id} - {rest.capitalize()}" if rest else case_id


@dataclass
class CaseResult:
    """One test case as recorded in JUnit XML."""

    name: str
    title: str
    status: CaseStatus
    duration_ms: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, d: dict) -> CaseResult:
        name = d.get("name", "")
        return cls(
            name=name,
            title=d.get("title") or case_title(name),
            status=CaseStatus(d.get("status", CaseStatus.SKIPPED.value)),
            duration_ms=int(d.get("duration_ms", 0)),
            error=d.get("error"),
        )


@dataclass
class SuiteResult:
    """All cases of one scenario run."""

    scenario: str
    title: str
    cases: list[CaseResult] = field(default_factory=list)
    exit_code: int = -1
    wall_clock_s: float = 0.0
    output_path: str = ""

    def count(self, status: CaseStatus) -> int:
        return sum(1 for c in self.cases if c.status == status)

    @property
    def passed(self) -> int:
        return self.count(CaseStatus.PASSED)

    @property
    def failed(self) -> int:
        return self.count(CaseStatus.FAILED)

    @property
    def completed(self) -> bool:
        """True when pytest ran to the end and recorded cases.

        Exit codes 0 and 1 are pytest's "all passed" and "some failed"; any
        other code (or -1 for a timeout) means the suite did not finish.
        """
        return bool(self.cases) and self.exit_code in (0, 1)

    @property
    def verdict(self) -> str:
        if not self.cases:
            return "no-tests"
        if self.failed == 0:
            return "pass"
        if self.passed > 0:
            return "partial"
        return "fail"

    def to_dict(self) -> dict:
        return {
            "scenario": self.scenario,
            "title": self.title,
            "exit_code": self.exit_code,
            "wall_clock_s": self.wall_clock_s,
            "output_path": self.output_path,
            "cases": [c.to_dict() for c in self.cases],
        }

    @classmethod
    def from_dict(cls, d: dict) -> SuiteResult:
        return cls(
            scenario=d.get("scenario", ""),
            title=d.get("title", ""),
            cases=[CaseResult.from_dict(c) for c in d.get("cases", [])],
            exit_code=d.get("exit_code", -1),
            wall_clock_s=d.get("wall_clock_s", 0.0),
            output_path=d.get("output_path", ""),
        )


@dataclass
class RunResult:
    """Complete result of a single hotelprobe run."""

    timestamp: str
    base_url: str = ""
    suites: list[SuiteResult] = field(default_factory=list)
    wall_clock_s: float = 0.0

    @property
    def cases(self) -> list[CaseResult]:
        return [c for s in self.suites for c in s.cases]

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "timestamp": self.timestamp,
            "base_url": self.base_url,
            "wall_clock_s": self.wall_clock_s,
            "suites": [s.to_dict() for s in self.suites],
        }

    @classmethod
    def from_dict(cls, d: dict) -> RunResult:
        """Deserialize from a JSON dict (results.json)."""
        return cls(
            timestamp=d.get("timestamp", ""),
            base_url=d.get("base_url", ""),
            suites=[SuiteResult.from_dict(s) for s in d.get("suites", [])],
            wall_clock_s=d.get("wall_clock_s", 0.0),
        )

    def save(self, run_dir: Path) -> Path:
        """Write results.json to the run directory."""
        run_dir.mkdir(parents=True, exist_ok=True)
        path = run_dir / RESULTS_FILE
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, run_dir: Path) -> Optional[RunResult]:
        """Load results.json from a run directory."""
        p = run_dir / RESULTS_FILE
        if not p.exists():
            return None
        try:
            return cls.from_dict(json.loads(p.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, OSError, ValueError):
            return None
