"""Tests for settings resolution and the subprocess environment."""

from pathlib import Path

import pytest

from hotelprobe.config import CI_RETRIES, DEFAULT_BASE_URL, ConfigError, Settings, load_settings
from hotelprobe.environment import build_run_env


def test_defaults_from_empty_env():
    s = Settings.from_env({})
    assert s.base_url == DEFAULT_BASE_URL
    assert s.username == "testuser"
    assert s.password == "Test123!"
    assert s.admin_code == "admin-secret-code"
    assert s.request_timeout_s == 30.0
    assert s.retries == 0
    assert s.results_dir == Path("test-results")
    assert s.ci is False


def test_values_from_env():
    s = Settings.from_env({
        "API_BASE_URL": "http://api:8080",
        "TEST_USERNAME": "qa",
        "TEST_PASSWORD": "secret",
        "ADMIN_CODE": "xyz",
        "HOTELPROBE_REQUEST_TIMEOUT": "5",
        "HOTELPROBE_RESULTS_DIR": "/tmp/out",
    })
    assert s.base_url == "http://api:8080"
    assert s.username == "qa"
    assert s.password == "secret"
    assert s.admin_code == "xyz"
    assert s.request_timeout_s == 5.0
    assert s.results_dir == Path("/tmp/out")


def test_ci_enables_retries():
    assert Settings.from_env({"CI": "true"}).retries == CI_RETRIES
    assert Settings.from_env({"CI": "true", "HOTELPROBE_RETRIES": "0"}).retries == 0
    assert Settings.from_env({"CI": "0"}).retries == 0


@pytest.mark.parametrize("name, value", [
    ("HOTELPROBE_RETRIES", "two"),
    ("HOTELPROBE_RETRIES", "1.5"),
    ("HOTELPROBE_REQUEST_TIMEOUT", "30s"),
])
def test_invalid_number_names_the_variable(name, value):
    with pytest.raises(ConfigError, match=name):
        Settings.from_env({name: value})


def test_with_overrides():
    s = Settings()
    assert s.with_overrides(base_url=None) is s
    assert s.with_overrides(base_url="http://other").base_url == "http://other"


def test_load_settings_reads_env_file(tmp_path, monkeypatch):
    # setenv first so monkeypatch restores the original state after load_dotenv
    for key in ("API_BASE_URL", "TEST_USERNAME"):
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    env_file = tmp_path / ".env"
    env_file.write_text("API_BASE_URL=http://from-dotenv:5000\nTEST_USERNAME=dotenv-user\n")

    s = load_settings(env_file)

    assert s.base_url == "http://from-dotenv:5000"
    assert s.username == "dotenv-user"


def test_real_env_wins_over_env_file(tmp_path, monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://real-env")
    env_file = tmp_path / ".env"
    env_file.write_text("API_BASE_URL=http://from-dotenv\n")

    assert load_settings(env_file).base_url == "http://real-env"


def test_build_run_env_carries_settings(monkeypatch):
    monkeypatch.setenv("PYTEST_ADDOPTS", "-x")
    settings = Settings(base_url="http://cli-override", retries=2, results_dir=Path("out"))

    env = build_run_env(settings)

    assert env["API_BASE_URL"] == "http://cli-override"
    assert env["HOTELPROBE_RETRIES"] == "2"
    assert env["HOTELPROBE_RESULTS_DIR"] == "out"
    assert "PYTEST_ADDOPTS" not in env
    assert Settings.from_env(env).base_url == "http://cli-override"
