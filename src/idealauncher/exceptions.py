"""Custom exception hierarchy for idealauncher."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorType(StrEnum):
    """Coarse categories used to decide retries and user-facing messages."""

    NETWORK = "NETWORK"
    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    SERVER = "SERVER"
    AI_SERVICE = "AI_SERVICE"
    DATABASE = "DATABASE"
    UNKNOWN = "UNKNOWN"


class IdeaLauncherError(Exception):
    """Base exception for all idealauncher errors."""


class IdeaLauncherConfigError(IdeaLauncherError):
    """Invalid or missing configuration."""


class CacheTypeError(IdeaLauncherError, TypeError):
    """A cache key was bound to two different value types."""

    def __init__(self, key: str, bound: Any, requested: Any) -> None:
        self.key = key
        self.bound = bound
        self.requested = requested
        super().__init__(f"Cache key {key!r} is bound to {bound!r}, not {requested!r}")


class ApiError(IdeaLauncherError):
    """HTTP-level or application-level failure from the IdeaLauncher API."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        type: ErrorType = ErrorType.UNKNOWN,  # noqa: A002
        *,
        code: str | None = None,
        details: Any = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.type = type
        self.code = code
        self.details = details
        self.endpoint = endpoint
        super().__init__(message)


class CommitFailure(IdeaLauncherError):
    """An optimistic commit's action raised.

    Never raised by :meth:`Optimistic.commit_update`; instances are only
    exposed through the binding's ``error`` field and ``on_error`` callback.
    ``cause`` is the exception the action raised.
    """

    def __init__(self, cause: BaseException, *, key: str | None = None, reverted: bool = True) -> None:
        self.cause = cause
        self.key = key
        self.reverted = reverted
        super().__init__(str(cause))
