"""Settings for hotelprobe runs.

Values come from the process environment, optionally seeded from a .env file
in the working directory. The variable names match the ones the hotel API
team already uses in CI (API_BASE_URL, TEST_USERNAME, ...).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_USERNAME = "testuser"
DEFAULT_PASSWORD = "Test123!"
DEFAULT_ADMIN_CODE = "admin-secret-code"
DEFAULT_RESULTS_DIR = "test-results"
DEFAULT_REQUEST_TIMEOUT_S = 30.0

# Reruns applied to failed cases when running under CI.
CI_RETRIES = 2


class ConfigError(ValueError):
    """An environment variable holds a value hotelprobe cannot use."""


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _number(env: dict[str, str], name: str, kind: type, default):
    """Read a numeric variable, naming it in the error when it does not parse."""
    raw = env.get(name)
    if not raw:
        return default
    try:
        return kind(raw)
    except ValueError:
        what = "an integer" if kind is int else "a number"
        raise ConfigError(f"{name} must be {what}, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Everything a run needs to reach the API and store its results."""

    base_url: str = DEFAULT_BASE_URL
    username: str = DEFAULT_USERNAME
    password: str = DEFAULT_PASSWORD
    admin_code: str = DEFAULT_ADMIN_CODE
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    retries: int = 0
    results_dir: Path = Path(DEFAULT_RESULTS_DIR)
    ci: bool = False

    @classmethod
    def from_env(cls, env: Optional[dict[str, str]] = None) -> Settings:
        """Build settings from an env mapping (defaults to os.environ).

        Raises ConfigError naming the variable when a numeric value is invalid.
        """
        env = os.environ if env is None else env
        ci = _truthy(env.get("CI"))
        retries = _number(env, "HOTELPROBE_RETRIES", int, CI_RETRIES if ci else 0)
        return cls(
            base_url=env.get("API_BASE_URL") or DEFAULT_BASE_URL,
            username=env.get("TEST_USERNAME") or DEFAULT_USERNAME,
            password=env.get("TEST_PASSWORD") or DEFAULT_PASSWORD,
            admin_code=env.get("ADMIN_CODE") or DEFAULT_ADMIN_CODE,
            request_timeout_s=_number(env, "HOTELPROBE_REQUEST_TIMEOUT", float, DEFAULT_REQUEST_TIMEOUT_S),
            retries=max(retries, 0),
            results_dir=Path(env.get("HOTELPROBE_RESULTS_DIR") or DEFAULT_RESULTS_DIR),
            ci=ci,
        )

    def with_overrides(self, base_url: Optional[str] = None) -> Settings:
        """Return a copy with CLI overrides applied."""
        if base_url:
            return replace(self, base_url=base_url)
        return self


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load .env (without clobbering real env vars) and read settings."""
    load_dotenv(dotenv_path=env_file or Path.cwd() / ".env", override=False)
    return Settings.from_env()
