"""Scenario discovery and loading for hotelprobe.

Each scenario is a subdirectory of hotelprobe/scenarios/ containing:
    __init__.py  NAME, TITLE, DESCRIPTION, ORDER, TIMEOUT_S, TOTAL_TESTS constants
    tests/       pytest module with the ordered, stateful cases

Scenarios run in ORDER; the cases inside each module run in file order.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ScenarioInfo:
    """Metadata about a discovered scenario."""

    name: str
    title: str
    description: str
    order: int
    timeout_s: int
    total_tests: int
    path: Path
    tests_dir: Path


def _scenarios_root() -> Path:
    """Absolute path to the scenarios/ directory."""
    return Path(__file__).parent


def list_scenarios() -> list[ScenarioInfo]:
    """Discover all available scenarios, in execution order.

    Scans subdirectories of hotelprobe/scenarios/ for valid scenario packages
    (those with __init__.py and a tests/ directory).
    """
    root = _scenarios_root()
    scenarios = []

    for child in sorted(root.iterdir()):
        if not child.is_dir():
            continue
        if not (child / "__init__.py").exists() or not (child / "tests").is_dir():
            continue

        info = load_scenario(child.name)
        if info:
            scenarios.append(info)

    scenarios.sort(key=lambda s: (s.order, s.name))
    return scenarios


def load_scenario(name: str) -> Optional[ScenarioInfo]:
    """Load a single scenario by name.

    Args:
        name: Directory name under hotelprobe/scenarios/ (e.g., 'reservation_flow').

    Returns:
        ScenarioInfo if the scenario exists and is valid, None otherwise.
    """
    root = _scenarios_root()
    scenario_dir = root / name
    tests_dir = scenario_dir / "tests"

    if not scenario_dir.is_dir() or not tests_dir.is_dir():
        return None

    # Import the scenario's __init__.py to get metadata
    try:
        mod = importlib.import_module(f"hotelprobe.scenarios.{name}")
    except ImportError:
        return None

    scenario_name = getattr(mod, "NAME", name)

    return ScenarioInfo(
        name=scenario_name,
        title=getattr(mod, "TITLE", scenario_name),
        description=getattr(mod, "DESCRIPTION", ""),
        order=getattr(mod, "ORDER", 100),
        timeout_s=getattr(mod, "TIMEOUT_S", 300),
        total_tests=getattr(mod, "TOTAL_TESTS", 0),
        path=scenario_dir,
        tests_dir=tests_dir,
    )
