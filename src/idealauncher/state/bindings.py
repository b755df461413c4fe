"""Optimistic bindings for the values the workspace edits in place."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from idealauncher.exceptions import CommitFailure
from idealauncher.models.idea import Idea
from idealauncher.models.score import ScoreInput
from idealauncher.state import keys
from idealauncher.state.cache import SharedCache
from idealauncher.state.optimistic import Optimistic

_logger = logging.getLogger(__name__)


def optimistic_document(
    cache: SharedCache,
    idea_id: str,
    initial_content: str = "",
    *,
    revert_on_error: bool = True,
) -> Optimistic[str]:
    """Binding for an idea's working document, keyed ``document:<idea_id>``."""

    def _log_failure(failure: CommitFailure) -> None:
        _logger.error("Document update failed for idea %s: %s", idea_id, failure.cause)

    return Optimistic(
        initial_content,
        cache=cache,
        cache_key=keys.document(idea_id),
        value_type=str,
        on_error=_log_failure,
        revert_on_error=revert_on_error,
    )


def optimistic_score(
    cache: SharedCache,
    idea_id: str,
    initial_score: ScoreInput | None = None,
    *,
    revert_on_error: bool = True,
) -> Optimistic[ScoreInput]:
    """Binding for an idea's current score, keyed ``score:<idea_id>``.

    A confirmed score changes the idea's stored totals, so the cached
    idea is dropped and the next read refetches it.
    """

    def _drop_idea(_score: ScoreInput | None) -> None:
        cache.delete(keys.idea(idea_id))

    return Optimistic(
        initial_score,
        cache=cache,
        cache_key=keys.score(idea_id),
        value_type=ScoreInput,
        on_success=_drop_idea,
        revert_on_error=revert_on_error,
    )


class OptimisticIdeas(Optimistic[list[Idea]]):
    """The dashboard's idea list, keyed ``ideas:<user_id>``."""

    def __init__(
        self,
        cache: SharedCache,
        user_id: str,
        initial_ideas: Iterable[Idea] = (),
        *,
        revert_on_error: bool = True,
    ) -> None:
        super().__init__(
            list(initial_ideas),
            cache=cache,
            cache_key=keys.ideas(user_id),
            value_type=list[Idea],
            revert_on_error=revert_on_error,
        )
        self.user_id = user_id

    def add_idea(self, idea: Idea) -> None:
        """Show *idea* at the top of the list."""
        self.update_optimistic(lambda current: [idea, *(current or [])])

    def update_idea(self, idea_id: str, **changes: Any) -> None:
        self.update_optimistic(
            lambda current: [
                idea.model_copy(update=changes) if idea.id == idea_id else idea for idea in (current or [])
            ]
        )

    def remove_idea(self, idea_id: str) -> None:
        self.update_optimistic(lambda current: [idea for idea in (current or []) if idea.id != idea_id])
