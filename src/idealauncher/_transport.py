"""HTTP transport for the IdeaLauncher JSON API and streamed chat replies."""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, Protocol

import aiohttp

from idealauncher._redact import redact_for_log
from idealauncher._retry import with_retry
from idealauncher.config import IdeaLauncherConfig
from idealauncher.exceptions import ApiError, ErrorType

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules and tests depend on this protocol; the production
    implementation is :class:`HttpTransport`.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        ...

    def stream(self, method: str, endpoint: str, *, json: Any = None) -> AsyncIterator[str]:
        ...


def _classify_status(status: int, fallback: ErrorType) -> ErrorType:
    if status == 401:
        return ErrorType.AUTHENTICATION
    if status == 403:
        return ErrorType.AUTHORIZATION
    if status == 404:
        return ErrorType.NOT_FOUND
    if 400 <= status < 500:
        return ErrorType.VALIDATION
    return fallback


async def _error_from_response(resp: aiohttp.ClientResponse, endpoint: str) -> ApiError:
    """Build an :class:`ApiError` from a non-2xx response."""
    text = await resp.text()
    message = f"HTTP {resp.status}: {resp.reason}"
    error_type = ErrorType.SERVER
    code: str | None = None
    details: Any = None

    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        body = None

    if isinstance(body, dict):
        if body.get("error"):
            message = str(body["error"])
        try:
            error_type = ErrorType(body.get("type"))
        except ValueError:
            pass
        code = body.get("code")
        details = body.get("details")
    elif text.strip() and len(text) <= 200:
        # Chat routes answer errors with a plain-text body.
        message = text.strip()

    return ApiError(
        message,
        resp.status,
        _classify_status(resp.status, error_type),
        code=code,
        details=details,
        endpoint=endpoint,
    )


class HttpTransport:
    """aiohttp transport with timeouts, error mapping and retries."""

    def __init__(self, config: IdeaLauncherConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            **self._config.headers,
        }

    def _trace(self, method: str, url: str, payload: Any) -> None:
        if self._config.api_trace_enabled:
            _logger.debug("%s %s body=%s", method, url, redact_for_log(payload))
        else:
            _logger.debug("%s %s", method, url)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a JSON request, retrying retryable failures.

        Returns the decoded JSON body, or ``{}`` for non-JSON responses.
        """

        async def _once() -> Any:
            return await self._request_once(method, endpoint, payload=json, params=params)

        return await with_retry(
            _once,
            retries=self._config.retries,
            delay=self._config.retry_delay,
            backoff=self._config.retry_backoff,
            label=f"{method} {endpoint}",
        )

    async def _request_once(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Any,
        params: Mapping[str, str] | None,
    ) -> Any:
        url = f"{self._config.base_url}{endpoint}"
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
        self._trace(method, url, payload)

        try:
            async with self._http.request(
                method,
                url,
                json=payload,
                params=params,
                headers=self._headers(),
                timeout=timeout,
            ) as resp:
                if resp.status >= 400:
                    raise await _error_from_response(resp, endpoint)
                if "application/json" not in resp.headers.get("content-type", ""):
                    return {}
                text = await resp.text()
        except ApiError:
            raise
        except TimeoutError as exc:
            raise ApiError("Request timeout", 408, ErrorType.NETWORK, endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise ApiError(f"Network error: {exc}", 0, ErrorType.NETWORK, endpoint=endpoint) from exc

        try:
            body = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise ApiError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                resp.status,
                ErrorType.SERVER,
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response %s %s: %s", method, endpoint, redact_for_log(body))
        return body

    async def stream(self, method: str, endpoint: str, *, json: Any = None) -> AsyncIterator[str]:
        """Yield decoded text chunks of a streamed response body.

        Streams are not retried: chunks may already have been consumed.
        """
        url = f"{self._config.base_url}{endpoint}"
        timeout = aiohttp.ClientTimeout(total=self._config.stream_timeout)
        self._trace(method, url, json)

        try:
            async with self._http.request(
                method,
                url,
                json=json,
                headers={**self._headers(), "accept": "text/plain"},
                timeout=timeout,
            ) as resp:
                if resp.status >= 400:
                    raise await _error_from_response(resp, endpoint)
                decoder = codecs.getincrementaldecoder("utf-8")()
                async for raw in resp.content.iter_any():
                    text = decoder.decode(raw)
                    if text:
                        yield text
                tail = decoder.decode(b"", final=True)
                if tail:
                    yield tail
        except ApiError:
            raise
        except TimeoutError as exc:
            raise ApiError("Request timeout", 408, ErrorType.NETWORK, endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise ApiError(f"Network error: {exc}", 0, ErrorType.NETWORK, endpoint=endpoint) from exc
