from __future__ import annotations

import pytest

from idealauncher.config import IdeaLauncherConfig
from idealauncher.exceptions import IdeaLauncherConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "IDEALAUNCHER_BASE_URL",
        "IDEALAUNCHER_RETRIES",
        "IDEALAUNCHER_CACHE_TTL",
        "IDEALAUNCHER_REVERT_ON_ERROR",
        "IDEALAUNCHER_API_TRACE_ENABLED",
        "IDEALAUNCHER_SESSION_COOKIE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = IdeaLauncherConfig.from_env()
    assert config.base_url == "http://localhost:3000"
    assert config.retries == 3
    assert config.cache_ttl == 300
    assert config.revert_on_error is True
    assert config.api_trace_enabled is False
    assert dict(config.headers) == {}


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDEALAUNCHER_BASE_URL", "https://ideas.example.com/")
    monkeypatch.setenv("IDEALAUNCHER_RETRIES", "5")
    monkeypatch.setenv("IDEALAUNCHER_CACHE_TTL", "0")
    monkeypatch.setenv("IDEALAUNCHER_REVERT_ON_ERROR", "off")
    monkeypatch.setenv("IDEALAUNCHER_API_TRACE_ENABLED", "yes")
    monkeypatch.setenv("IDEALAUNCHER_SESSION_COOKIE", "next-auth.session-token=abc")

    config = IdeaLauncherConfig.from_env()

    assert config.base_url == "https://ideas.example.com"
    assert config.retries == 5
    assert config.cache_ttl == 0
    assert config.revert_on_error is False
    assert config.api_trace_enabled is True
    assert dict(config.headers) == {"cookie": "next-auth.session-token=abc"}


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDEALAUNCHER_RETRIES", "5")
    monkeypatch.setenv("IDEALAUNCHER_REVERT_ON_ERROR", "false")

    config = IdeaLauncherConfig.from_env(retries=0, revert_on_error=True)

    assert config.retries == 0
    assert config.revert_on_error is True


def test_invalid_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDEALAUNCHER_RETRIES", "many")
    with pytest.raises(IdeaLauncherConfigError, match="IDEALAUNCHER_RETRIES"):
        IdeaLauncherConfig.from_env()


def test_validation() -> None:
    with pytest.raises(IdeaLauncherConfigError):
        IdeaLauncherConfig(base_url="")
    with pytest.raises(IdeaLauncherConfigError):
        IdeaLauncherConfig(retries=-1)
    with pytest.raises(IdeaLauncherConfigError):
        IdeaLauncherConfig(request_timeout=0)
