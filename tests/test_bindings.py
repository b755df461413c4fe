from __future__ import annotations

import logging

import pytest

from idealauncher.models.idea import Idea, IdeaPhase
from idealauncher.models.score import ScoreFramework, ScoreInput
from idealauncher.state import keys
from idealauncher.state.bindings import OptimisticIdeas, optimistic_document, optimistic_score
from idealauncher.state.cache import SharedCache


def _idea(idea_id: str, title: str) -> Idea:
    return Idea(id=idea_id, title=title)


async def _ok() -> dict[str, bool]:
    return {"success": True}


async def _fail() -> None:
    raise ConnectionError("network")


@pytest.mark.asyncio
async def test_document_binding_logs_and_reverts_on_failure(caplog: pytest.LogCaptureFixture) -> None:
    cache = SharedCache()
    doc = optimistic_document(cache, "idea-1", "# Draft")
    assert doc.cache_key == "document:idea-1"

    doc.update_optimistic(lambda _cur: "# Draft v2")
    assert cache.get("document:idea-1") == "# Draft v2"

    with caplog.at_level(logging.ERROR, logger="idealauncher.state.bindings"):
        assert await doc.commit_update(_fail) is None

    assert doc.data == "# Draft"
    assert cache.get("document:idea-1") == "# Draft"
    assert "Document update failed for idea idea-1" in caplog.text


@pytest.mark.asyncio
async def test_two_document_bindings_share_the_cache_entry() -> None:
    cache = SharedCache()
    editor = optimistic_document(cache, "idea-1", "body")
    preview = optimistic_document(cache, "idea-1", "body")

    editor.update_optimistic(lambda _cur: "edited")
    await editor.commit_update(_ok)

    assert cache.get(keys.document("idea-1")) == "edited"
    assert preview.data == "body"


@pytest.mark.asyncio
async def test_score_binding_drops_cached_idea_on_success() -> None:
    cache = SharedCache()
    cache.set(keys.idea("idea-1"), {"id": "idea-1"})
    binding = optimistic_score(cache, "idea-1")
    score = ScoreInput.build(ScoreFramework.ICE, impact=8, confidence=5, ease=5)

    binding.update_optimistic(lambda _cur: score)
    await binding.commit_update(_ok)

    assert binding.data == score
    assert cache.get(keys.score("idea-1")) == score
    assert keys.idea("idea-1") not in cache


@pytest.mark.asyncio
async def test_score_binding_keeps_cached_idea_on_failure() -> None:
    cache = SharedCache()
    cache.set(keys.idea("idea-1"), {"id": "idea-1"})
    binding = optimistic_score(cache, "idea-1")

    binding.update_optimistic(lambda _cur: ScoreInput.build("ICE", impact=1, confidence=1, ease=1))
    await binding.commit_update(_fail)

    assert binding.data is None
    assert keys.idea("idea-1") in cache
    assert keys.score("idea-1") not in cache


def test_ideas_binding_add_update_remove() -> None:
    cache = SharedCache()
    ideas = OptimisticIdeas(cache, "user-1", [_idea("a", "Alpha"), _idea("b", "Beta")])

    ideas.add_idea(_idea("c", "Gamma"))
    assert [idea.id for idea in ideas.data or []] == ["c", "a", "b"]

    ideas.update_idea("a", title="Alpha 2", phase=IdeaPhase.SCORING)
    by_id = {idea.id: idea for idea in ideas.data or []}
    assert by_id["a"].title == "Alpha 2"
    assert by_id["a"].phase is IdeaPhase.SCORING
    assert by_id["b"].title == "Beta"

    ideas.remove_idea("b")
    assert [idea.id for idea in ideas.data or []] == ["c", "a"]
    assert ideas.is_optimistic is True

    cached = cache.bind(keys.ideas("user-1"), list[Idea]).get()
    assert cached is not None
    assert [idea.id for idea in cached] == ["c", "a"]


@pytest.mark.asyncio
async def test_ideas_binding_reverts_whole_list() -> None:
    cache = SharedCache()
    ideas = OptimisticIdeas(cache, "user-1", [_idea("a", "Alpha")])

    ideas.add_idea(_idea("b", "Beta"))
    ideas.remove_idea("a")
    await ideas.commit_update(_fail)

    assert [idea.id for idea in ideas.data or []] == ["a"]
    assert ideas.error is not None
