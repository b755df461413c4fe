"""Error classification and retry with exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import ValidationError

from idealauncher.exceptions import ApiError, CommitFailure, ErrorType

_logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Failures that will not change on a second attempt.
NON_RETRYABLE: frozenset[ErrorType] = frozenset(
    {
        ErrorType.AUTHENTICATION,
        ErrorType.AUTHORIZATION,
        ErrorType.VALIDATION,
        ErrorType.NOT_FOUND,
    }
)

_KEYWORD_TYPES: tuple[tuple[tuple[str, ...], ErrorType], ...] = (
    (("network", "fetch", "connection"), ErrorType.NETWORK),
    (("unauthorized", "401"), ErrorType.AUTHENTICATION),
    (("forbidden", "403"), ErrorType.AUTHORIZATION),
    (("not found", "404"), ErrorType.NOT_FOUND),
    (("openai", "model", "ai service"), ErrorType.AI_SERVICE),
    (("database", "prisma"), ErrorType.DATABASE),
)

_MESSAGES: dict[ErrorType, str] = {
    ErrorType.NETWORK: "Network connection failed. Please check your internet connection and try again.",
    ErrorType.VALIDATION: "Please check your input and try again.",
    ErrorType.AUTHENTICATION: "Please sign in to continue.",
    ErrorType.AUTHORIZATION: "You don't have permission to perform this action.",
    ErrorType.NOT_FOUND: "The requested resource was not found.",
    ErrorType.AI_SERVICE: "AI service is temporarily unavailable. Please try again in a moment.",
    ErrorType.DATABASE: "Database error occurred. Please try again.",
    ErrorType.SERVER: "Server error occurred. Please try again later.",
}


def classify_error(error: BaseException) -> ErrorType:
    """Map any exception onto an :class:`ErrorType`."""
    if isinstance(error, CommitFailure):
        return classify_error(error.cause)
    if isinstance(error, ApiError):
        return error.type
    if isinstance(error, ValidationError):
        return ErrorType.VALIDATION
    if isinstance(error, TimeoutError):
        return ErrorType.NETWORK

    message = str(error).lower()
    for keywords, error_type in _KEYWORD_TYPES:
        if any(keyword in message for keyword in keywords):
            return error_type
    return ErrorType.UNKNOWN


def error_message(error: BaseException) -> str:
    """User-facing text for *error*."""
    error_type = classify_error(error)
    if error_type is ErrorType.VALIDATION and isinstance(error, ValidationError):
        errors = error.errors()
        if errors:
            return str(errors[0]["msg"])
    message = _MESSAGES.get(error_type)
    if message is not None:
        return message
    return str(error) or "An unexpected error occurred. Please try again."


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    *,
    label: str = "request",
) -> T:
    """Call *fn*, retrying retryable failures up to *retries* extra times.

    The wait before retry ``n`` (0-based) is ``delay * backoff ** n``.
    Errors classified as authentication, authorization, validation or
    not-found are raised immediately.
    """
    for attempt in range(retries + 1):
        try:
            return await fn()
        except Exception as exc:
            if classify_error(exc) in NON_RETRYABLE or attempt == retries:
                raise
            wait = delay * (backoff**attempt)
            _logger.info(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                label,
                attempt + 1,
                retries + 1,
                exc,
                wait,
            )
            await asyncio.sleep(wait)

    raise AssertionError("unreachable")  # pragma: no cover
