"""Pytest plugin shared by every scenario suite.

The runner loads it with `-p hotelprobe.scenarios.fixtures`. Clients and the
fixture state are module-scoped: each scenario module gets its own session
and its own captured IDs, and the cases inside it share both in file order.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

import httpx
import pytest

from hotelprobe.client import ApiClient
from hotelprobe.config import Settings, load_settings

# Identifier that never exists on the server.
MISSING_ID = "00000000-0000-0000-0000-000000000000"


class ScenarioState(dict):
    """Identifiers captured by earlier cases of the same scenario."""

    def require(self, key: str) -> Any:
        """Return a captured value, failing the current case if it is absent."""
        value = self.get(key)
        if value is None or value == "":
            pytest.fail(f"'{key}' was not captured by an earlier case", pytrace=False)
        return value


def pytest_report_header(config) -> str:
    return f"hotelprobe target: {load_settings().base_url}"


@pytest.fixture(scope="session")
def settings() -> Settings:
    return load_settings()


@pytest.fixture(scope="session")
def api_transport() -> Optional[httpx.BaseTransport]:
    """Transport shared by every client; None uses the network.

    Override in a conftest.py to point the suites at something else.
    """
    return None


@pytest.fixture(scope="module")
def state() -> ScenarioState:
    return ScenarioState()


@pytest.fixture(scope="module")
def api(settings: Settings, api_transport: Optional[httpx.BaseTransport]) -> Iterator[ApiClient]:
    """A fresh, not yet authenticated session."""
    with ApiClient(settings, transport=api_transport) as client:
        yield client


@pytest.fixture(scope="module")
def authed_api(settings: Settings, api_transport: Optional[httpx.BaseTransport]) -> Iterator[ApiClient]:
    """A session logged in as the test user before the first case runs."""
    with ApiClient(settings, transport=api_transport) as client:
        response = client.login(settings.username, settings.password)
        client.log_exchange("login", response)
        yield client


@pytest.fixture(scope="module")
def unauth_api(settings: Settings, api_transport: Optional[httpx.BaseTransport]) -> Iterator[ApiClient]:
    """A session that never logs in."""
    with ApiClient(settings, transport=api_transport) as client:
        yield client
