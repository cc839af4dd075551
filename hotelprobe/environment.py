"""Environment builder for scenario subprocesses.

Each scenario runs in its own pytest process. The fixtures plugin reads its
settings from the environment, so the runner passes an explicit env dict
carrying the resolved Settings (including CLI overrides).
"""

from __future__ import annotations

import os

from hotelprobe.config import Settings

# Vars that would change pytest's behavior behind the runner's back.
_PYTEST_OVERRIDE_VARS = ("PYTEST_ADDOPTS", "PYTEST_PLUGINS")


def build_run_env(settings: Settings) -> dict[str, str]:
    """Build env for a scenario run from the current process env and settings."""
    env = os.environ.copy()
    for key in _PYTEST_OVERRIDE_VARS:
        env.pop(key, None)

    env.update({
        "API_BASE_URL": settings.base_url,
        "TEST_USERNAME": settings.username,
        "TEST_PASSWORD": settings.password,
        "ADMIN_CODE": settings.admin_code,
        "HOTELPROBE_REQUEST_TIMEOUT": str(settings.request_timeout_s),
        "HOTELPROBE_RETRIES": str(settings.retries),
        "HOTELPROBE_RESULTS_DIR": str(settings.results_dir),
        # Rich would otherwise guess a terminal width inside captured output
        "COLUMNS": env.get("COLUMNS", "120"),
    })
    return env
