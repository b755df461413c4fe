"""Client-side state layer.

Optimistic bindings and the shared cache they mirror into. The cache is
always passed in explicitly; there is no module-level instance.
"""

from idealauncher.state.bindings import OptimisticIdeas, optimistic_document, optimistic_score
from idealauncher.state.cache import CacheJanitor, CacheSlot, CacheStats, SharedCache, optimistic_update, with_cache
from idealauncher.state.optimistic import Optimistic, OptimisticState

__all__ = [
    "CacheJanitor",
    "CacheSlot",
    "CacheStats",
    "Optimistic",
    "OptimisticIdeas",
    "OptimisticState",
    "SharedCache",
    "optimistic_document",
    "optimistic_score",
    "optimistic_update",
    "with_cache",
]
