"""Optimistic state with revert-on-failure.

A binding holds one visible value plus the last confirmed value (the
*baseline*). :meth:`Optimistic.update_optimistic` changes the visible
value immediately; :meth:`Optimistic.commit_update` runs the
authoritative async action and either confirms the value or falls back
to the baseline.

Values written through a typed binding are the validated values: after
``update_optimistic`` or a successful commit, ``data`` is exactly what
the shared cache holds (``"5"`` bound as ``int`` is shown as ``5``).

Concurrent commits on one binding are not serialised: whichever action
resolves last decides the final value (last-write-wins), for both the
binding and its shared cache entry.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from idealauncher.exceptions import CommitFailure
from idealauncher.state.cache import CacheSlot, SharedCache

_logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class OptimisticState(Generic[T]):
    """Immutable snapshot of a binding's visible state."""

    data: T | None
    is_optimistic: bool = False
    error: CommitFailure | None = None


class Optimistic(Generic[T]):
    """A value that can be changed speculatively and confirmed later.

    Parameters
    ----------
    initial : T or None
        Starting value; also the initial baseline.
    cache : SharedCache or None
        Cache to mirror the value into. Required when ``cache_key`` is set.
    cache_key : str or None
        Key of the shared entry. Every optimistic update, commit and
        revert writes the binding's value there.
    value_type : type or None
        When given, the key is bound to this type in the cache. ``initial``
        and every value written are validated against it, and the
        validated value is what ``data`` shows.
    cache_ttl : float or None
        TTL for the mirrored cache entry. ``None`` uses the cache's
        default TTL, after which the entry expires and the mirror is
        gone until the next write. ``0`` keeps it until deleted.
    on_success : callable or None
        Called with the confirmed value after a successful commit.
    on_error : callable or None
        Called with the :class:`CommitFailure` after a failed commit.
    revert_on_error : bool
        Restore the baseline when a commit fails (default). When
        ``False`` the unconfirmed value stays visible.
    """

    def __init__(
        self,
        initial: T | None = None,
        *,
        cache: SharedCache | None = None,
        cache_key: str | None = None,
        value_type: Any = None,
        on_success: Callable[[T | None], None] | None = None,
        on_error: Callable[[CommitFailure], None] | None = None,
        revert_on_error: bool = True,
        cache_ttl: float | None = None,
    ) -> None:
        if cache_key is not None and cache is None:
            raise ValueError("cache_key requires a cache")
        self._cache = cache
        self._cache_key = cache_key
        self._cache_ttl = cache_ttl
        self._slot: CacheSlot[Any] | None = None
        if cache is not None and cache_key is not None and value_type is not None:
            self._slot = cache.bind(cache_key, value_type)
            if initial is not None:
                initial = self._slot.adapter.validate_python(initial)
        self._on_success = on_success
        self._on_error = on_error
        self._revert_on_error = revert_on_error

        self._baseline: T | None = initial
        self._data: T | None = initial
        self._is_optimistic = False
        self._error: CommitFailure | None = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key={self._cache_key!r}, data={self._data!r}, "
            f"is_optimistic={self._is_optimistic}, error={self._error!r})"
        )

    @property
    def data(self) -> T | None:
        return self._data

    @property
    def is_optimistic(self) -> bool:
        return self._is_optimistic

    @property
    def error(self) -> CommitFailure | None:
        return self._error

    @property
    def baseline(self) -> T | None:
        """Last confirmed value; the revert target."""
        return self._baseline

    @property
    def cache_key(self) -> str | None:
        return self._cache_key

    @property
    def revert_on_error(self) -> bool:
        return self._revert_on_error

    @property
    def state(self) -> OptimisticState[T]:
        return OptimisticState(data=self._data, is_optimistic=self._is_optimistic, error=self._error)

    def _write_cache(self, value: T | None) -> T | None:
        """Mirror *value* into the cache and return the value as stored."""
        if self._cache is None or self._cache_key is None:
            return value
        if value is None:
            self._cache.delete(self._cache_key)
            return None
        if self._slot is not None:
            return self._slot.set(value, self._cache_ttl)
        self._cache.set(self._cache_key, value, self._cache_ttl)
        return value

    def update_optimistic(self, updater: Callable[[T | None], T]) -> None:
        """Apply *updater* to the current value without confirmation.

        Exceptions from *updater* (or from validating its result against
        the bound cache type) propagate and leave the state unchanged.
        """
        new_data = self._write_cache(updater(self._data))
        self._data = new_data
        self._is_optimistic = True
        self._error = None

    async def commit_update(
        self,
        action: Callable[[], Awaitable[R]],
        success_transform: Callable[[R, T | None], T] | None = None,
    ) -> R | None:
        """Run *action* and reconcile the visible value with its outcome.

        Returns the action's result, or ``None`` when it failed. Failures
        are never raised; they are recorded in :attr:`error` and passed
        to ``on_error``.
        """
        try:
            result = await action()
            if success_transform is not None:
                final = success_transform(result, self._data)
            else:
                final = self._data
            final = self._write_cache(final)
        except Exception as exc:  # noqa: BLE001
            self._fail(exc)
            return None

        self._baseline = final
        self._data = final
        self._is_optimistic = False
        self._error = None
        if self._on_success is not None:
            self._on_success(final)
        return result

    def _fail(self, exc: Exception) -> None:
        failure = CommitFailure(exc, key=self._cache_key, reverted=self._revert_on_error)
        self._is_optimistic = False
        self._error = failure
        if self._revert_on_error:
            self._data = self._baseline
            self._write_cache(self._baseline)
            _logger.warning("Commit for %s failed, reverted to baseline: %s", self._cache_key or "<unkeyed>", exc)
        else:
            _logger.warning("Commit for %s failed, keeping unconfirmed value: %s", self._cache_key or "<unkeyed>", exc)
        if self._on_error is not None:
            self._on_error(failure)

    def reset(self) -> None:
        """Show the baseline again and clear the optimistic and error flags."""
        self._data = self._baseline
        self._is_optimistic = False
        self._error = None
        self._write_cache(self._baseline)
