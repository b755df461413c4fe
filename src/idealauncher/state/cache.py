"""Keyed in-memory cache shared by optimistic bindings and the API client.

Every consumer holding the same key reads and overwrites the same entry.
Writes are whole-value assignments, so readers on the event loop never
observe a partially written value. A multi-threaded caller must add its
own lock.
"""

from __future__ import annotations

import asyncio
import contextlib
import copy
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter

from idealauncher.exceptions import CacheTypeError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Default entry time-to-live in seconds (5 minutes).
DEFAULT_TTL: float = 5 * 60


@dataclass(slots=True)
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        # ttl <= 0 means "keep until deleted".
        return self.ttl > 0 and (now - self.stored_at) > self.ttl


class CacheStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: int
    keys: list[str]


class SharedCache:
    """TTL cache keyed by strings such as ``"document:<idea_id>"``.

    Values are deep-copied on the way in and out, so a caller mutating
    what it read cannot change what another consumer sees.

    Parameters
    ----------
    default_ttl : float
        Lifetime in seconds for entries written without an explicit TTL.
    clock : Callable[[], float]
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        *,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._bindings: dict[str, Any] = {}

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        self._entries[key] = CacheEntry(
            value=copy.deepcopy(value),
            stored_at=self._clock(),
            ttl=self._default_ttl if ttl is None else ttl,
        )
        _logger.debug("Cache set %s (ttl=%s)", key, self._entries[key].ttl)

    def delete(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            _logger.debug("Cache delete %s", key)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), keys=list(self._entries))

    def keys_with_prefix(self, prefix: str) -> list[str]:
        return [key for key in self._entries if key.startswith(prefix)]

    def bind(self, key: str, type_: Any) -> CacheSlot[Any]:
        """Return a typed view of *key*.

        The first bind fixes the key's type for the lifetime of this cache.
        Binding the same key to another type raises :class:`CacheTypeError`.
        A value already stored under the key is validated immediately.
        """
        bound = self._bindings.get(key)
        if bound is not None and bound != type_:
            raise CacheTypeError(key, bound, type_)
        slot: CacheSlot[Any] = CacheSlot(self, key, type_)
        existing = self.get(key)
        if existing is not None:
            slot.adapter.validate_python(existing)
        self._bindings[key] = type_
        return slot


class CacheSlot(Generic[T]):
    """A single cache key whose values are validated as ``T``."""

    def __init__(self, cache: SharedCache, key: str, type_: Any) -> None:
        self.cache = cache
        self.key = key
        self.type = type_
        self.adapter: TypeAdapter[T] = TypeAdapter(type_)

    def __repr__(self) -> str:
        return f"CacheSlot(key={self.key!r}, type={self.type!r})"

    def get(self) -> T | None:
        raw = self.cache.get(self.key)
        if raw is None:
            return None
        return self.adapter.validate_python(raw)

    def set(self, value: Any, ttl: float | None = None) -> T:
        """Validate *value* as ``T``, store it and return the stored value."""
        validated = self.adapter.validate_python(value)
        self.cache.set(self.key, validated, ttl)
        return validated

    def delete(self) -> None:
        self.cache.delete(self.key)


async def with_cache(
    cache: SharedCache,
    key: str,
    fetcher: Callable[[], Awaitable[T]],
    ttl: float | None = None,
) -> T:
    """Return the cached value for *key*, fetching and storing it on a miss."""
    cached = cache.get(key)
    if cached is not None:
        _logger.debug("Cache hit %s", key)
        return cached  # type: ignore[no-any-return]

    data = await fetcher()
    cache.set(key, data, ttl)
    return data


def optimistic_update(
    cache: SharedCache,
    key: str,
    updater: Callable[[Any | None], T],
    ttl: float | None = None,
) -> T:
    """Read-modify-write a single entry; returns the value written."""
    updated = updater(cache.get(key))
    cache.set(key, updated, ttl)
    return updated


class CacheJanitor:
    """Background task that periodically drops expired cache entries."""

    def __init__(self, cache: SharedCache, interval: float) -> None:
        self._cache = cache
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._interval <= 0 or self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="idealauncher-cache-janitor")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            removed = self._cache.cleanup()
            if removed:
                _logger.debug("Cache cleanup removed %d expired entries", removed)
