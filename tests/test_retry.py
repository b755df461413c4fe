from __future__ import annotations

import pytest
from pydantic import ValidationError

from idealauncher import _retry
from idealauncher._retry import classify_error, error_message, with_retry
from idealauncher.exceptions import ApiError, CommitFailure, ErrorType
from idealauncher.models.requests import CreateIdeaRequest


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []

    async def _fake_sleep(delay: float) -> None:
        recorded.append(delay)

    monkeypatch.setattr(_retry.asyncio, "sleep", _fake_sleep)
    return recorded


def test_classify_error() -> None:
    assert classify_error(ApiError("nope", 403, ErrorType.AUTHORIZATION)) is ErrorType.AUTHORIZATION
    assert classify_error(RuntimeError("Network unreachable")) is ErrorType.NETWORK
    assert classify_error(RuntimeError("Unauthorized")) is ErrorType.AUTHENTICATION
    assert classify_error(RuntimeError("prisma: connection pool exhausted")) is ErrorType.NETWORK
    assert classify_error(RuntimeError("prisma client crashed")) is ErrorType.DATABASE
    assert classify_error(RuntimeError("openai quota exceeded")) is ErrorType.AI_SERVICE
    assert classify_error(TimeoutError()) is ErrorType.NETWORK
    assert classify_error(RuntimeError("something odd")) is ErrorType.UNKNOWN

    wrapped = CommitFailure(ApiError("gone", 404, ErrorType.NOT_FOUND))
    assert classify_error(wrapped) is ErrorType.NOT_FOUND


def test_error_message() -> None:
    assert error_message(ApiError("x", 401, ErrorType.AUTHENTICATION)) == "Please sign in to continue."
    assert error_message(RuntimeError("something odd")) == "something odd"

    with pytest.raises(ValidationError) as excinfo:
        CreateIdeaRequest(title="")
    assert classify_error(excinfo.value) is ErrorType.VALIDATION
    assert "at least 1 character" in error_message(excinfo.value)


@pytest.mark.asyncio
async def test_with_retry_backs_off_exponentially(sleeps: list[float]) -> None:
    attempts = 0

    async def _flaky() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise ApiError("Server error", 503, ErrorType.SERVER)
        return "ok"

    assert await with_retry(_flaky, retries=3, delay=1.0, backoff=2.0) == "ok"
    assert attempts == 3
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_with_retry_raises_last_error_when_exhausted(sleeps: list[float]) -> None:
    attempts = 0

    async def _down() -> None:
        nonlocal attempts
        attempts += 1
        raise ApiError(f"down {attempts}", 0, ErrorType.NETWORK)

    with pytest.raises(ApiError, match="down 3"):
        await with_retry(_down, retries=2, delay=0.5, backoff=3.0)
    assert sleeps == [0.5, 1.5]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error_type",
    [ErrorType.AUTHENTICATION, ErrorType.AUTHORIZATION, ErrorType.VALIDATION, ErrorType.NOT_FOUND],
)
async def test_with_retry_does_not_retry_client_errors(sleeps: list[float], error_type: ErrorType) -> None:
    attempts = 0

    async def _rejected() -> None:
        nonlocal attempts
        attempts += 1
        raise ApiError("rejected", 400, error_type)

    with pytest.raises(ApiError):
        await with_retry(_rejected, retries=5)
    assert attempts == 1
    assert sleeps == []
