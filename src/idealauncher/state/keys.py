"""Cache key builders and invalidation helpers."""

from __future__ import annotations

from collections.abc import Iterable

from idealauncher.state.cache import SharedCache


def ideas(user_id: str) -> str:
    return f"ideas:{user_id}"


def idea(idea_id: str) -> str:
    return f"idea:{idea_id}"


def document(idea_id: str) -> str:
    return f"document:{idea_id}"


def score(idea_id: str) -> str:
    return f"score:{idea_id}"


def chat_history(idea_id: str) -> str:
    return f"chat:{idea_id}"


def research(idea_id: str, research_type: str) -> str:
    return f"research:{idea_id}:{research_type}"


def scores(idea_id: str) -> str:
    return f"scores:{idea_id}"


def features(idea_id: str) -> str:
    return f"features:{idea_id}"


def exports(idea_id: str) -> str:
    return f"exports:{idea_id}"


def versions(idea_id: str) -> str:
    return f"versions:{idea_id}"


def domain_check(names: Iterable[str]) -> str:
    # Order-independent: the same set of names shares one entry.
    return f"domains:{','.join(sorted(names))}"


def invalidate_idea(cache: SharedCache, idea_id: str) -> None:
    """Drop every entry derived from a single idea's server state."""
    cache.delete(idea(idea_id))
    cache.delete(chat_history(idea_id))
    cache.delete(scores(idea_id))
    cache.delete(features(idea_id))


def invalidate_ideas(cache: SharedCache, user_id: str) -> None:
    cache.delete(ideas(user_id))


def invalidate_research(cache: SharedCache, idea_id: str, research_type: str | None = None) -> None:
    """Drop one research entry, or all of an idea's research when *research_type* is None."""
    if research_type is not None:
        cache.delete(research(idea_id, research_type))
        return
    for key in cache.keys_with_prefix(f"research:{idea_id}:"):
        cache.delete(key)
