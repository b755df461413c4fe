"""Client configuration for idealauncher."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any

from idealauncher.exceptions import IdeaLauncherConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(name: str, value: str, cast: Callable[[str], Any]) -> Any:
    try:
        return cast(value)
    except ValueError as exc:
        raise IdeaLauncherConfigError(f"{name} must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class IdeaLauncherConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the IdeaLauncher deployment (no trailing slash).
    request_timeout : float
        Per-request timeout in seconds for JSON calls.
    stream_timeout : float
        Total timeout in seconds for streamed chat responses.
    retries : int
        Extra attempts after the first one for retryable failures.
    retry_delay : float
        Seconds to wait before the first retry.
    retry_backoff : float
        Multiplier applied to ``retry_delay`` on every further retry.
    cache_ttl : float
        Default time-to-live in seconds for shared cache entries.
        ``0`` keeps entries until they are deleted.
    cache_cleanup_interval : float
        Seconds between background sweeps of expired cache entries.
        ``0`` disables the sweep.
    revert_on_error : bool
        Default for optimistic bindings created by the client.
    api_trace_enabled : bool
        Log redacted request and response bodies at DEBUG level.
    headers : Mapping[str, str]
        Extra headers sent with every request (e.g. the session cookie).
    """

    base_url: str = "http://localhost:3000"
    request_timeout: float = 30.0
    stream_timeout: float = 60.0
    retries: int = 3
    retry_delay: float = 1.0
    retry_backoff: float = 2.0
    cache_ttl: float = 5 * 60
    cache_cleanup_interval: float = 5 * 60
    revert_on_error: bool = True
    api_trace_enabled: bool = False
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.base_url:
            raise IdeaLauncherConfigError("base_url must be non-empty")
        if self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.retries < 0:
            raise IdeaLauncherConfigError("retries must be >= 0")
        if self.request_timeout <= 0 or self.stream_timeout <= 0:
            raise IdeaLauncherConfigError("timeouts must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> IdeaLauncherConfig:
        """Create configuration from ``IDEALAUNCHER_*`` environment variables.

        Explicit keyword arguments override environment values.
        ``IDEALAUNCHER_SESSION_COOKIE`` is sent as the ``cookie`` header.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("IDEALAUNCHER_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        _ENV_NUMERIC_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "IDEALAUNCHER_REQUEST_TIMEOUT": ("request_timeout", float),
            "IDEALAUNCHER_STREAM_TIMEOUT": ("stream_timeout", float),
            "IDEALAUNCHER_RETRIES": ("retries", int),
            "IDEALAUNCHER_RETRY_DELAY": ("retry_delay", float),
            "IDEALAUNCHER_RETRY_BACKOFF": ("retry_backoff", float),
            "IDEALAUNCHER_CACHE_TTL": ("cache_ttl", float),
            "IDEALAUNCHER_CACHE_CLEANUP_INTERVAL": ("cache_cleanup_interval", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        if "revert_on_error" not in overrides:
            config_kwargs["revert_on_error"] = _env_bool(env.get("IDEALAUNCHER_REVERT_ON_ERROR"), True)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("IDEALAUNCHER_API_TRACE_ENABLED"),
                False,
            )

        cookie = env.get("IDEALAUNCHER_SESSION_COOKIE")
        if cookie and "headers" not in overrides:
            config_kwargs["headers"] = {"cookie": cookie}

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
