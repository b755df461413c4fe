"""Tests for pydantic model parsing with ApiModel + ApiEnum."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from idealauncher.models.chat import ChatMessage, ChatRole
from idealauncher.models.idea import DocumentVersion, Idea, IdeaPhase, VersionChangeType
from idealauncher.models.insights import DomainStatus, Feature, ResearchType
from idealauncher.models.requests import (
    ChatRequest,
    CreateIdeaRequest,
    CreateVersionRequest,
    ListIdeasRequest,
    UpdateIdeaRequest,
)
from idealauncher.models.score import Score, ScoreFramework, ScoreInput, compute_total

# ------------------------------------------------------------------
# ApiEnum
# ------------------------------------------------------------------


class TestApiEnum:
    def test_unknown_value_falls_back(self) -> None:
        assert IdeaPhase("launch") == IdeaPhase.UNKNOWN

    def test_case_insensitive_match(self) -> None:
        assert ScoreFramework("ice") is ScoreFramework.ICE

    def test_all_enums_have_unknown(self) -> None:
        for cls in (IdeaPhase, ScoreFramework, ChatRole, ResearchType):
            assert cls("definitely-not-a-member") is cls.UNKNOWN  # type: ignore[attr-defined]


# ------------------------------------------------------------------
# Response models
# ------------------------------------------------------------------


def test_idea_parses_camel_case_payload() -> None:
    idea = Idea.model_validate(
        {
            "id": "clx1",
            "title": "Pet sitter marketplace",
            "oneLiner": "Uber for dog walking",
            "documentMd": "# Spec",
            "iceScore": 2.5,
            "riceScore": None,
            "phase": "scoring",
            "isArchived": False,
            "createdAt": "2025-09-15T10:11:28.000Z",
            "ownerId": "ignored",
        }
    )

    assert idea.one_liner == "Uber for dog walking"
    assert idea.document_md == "# Spec"
    assert idea.ice_score == 2.5
    assert idea.phase is IdeaPhase.SCORING
    assert idea.created_at == datetime(2025, 9, 15, 10, 11, 28, tzinfo=UTC)


def test_idea_list_projection_uses_defaults() -> None:
    idea = Idea.model_validate({"id": "clx2", "title": "Minimal"})
    assert idea.document_md == ""
    assert idea.phase is IdeaPhase.IDEATION
    assert idea.is_archived is False


def test_feature_and_domain_status() -> None:
    feature = Feature.model_validate({"title": "Sign-up", "priority": "must", "dependencies": ["auth"]})
    assert feature.dependencies == ["auth"]

    status = DomainStatus.model_validate({"domain": "petsit.io", "available": True, "status": "undelegated"})
    assert status.available is True
    assert status.summary == "Unknown status"


# ------------------------------------------------------------------
# Scoring
# ------------------------------------------------------------------


class TestScoring:
    def test_ice_total(self) -> None:
        score = ScoreInput.build("ICE", impact=8, confidence=5, ease=5)
        assert score.total == pytest.approx(2.0)
        assert score.to_payload() == {
            "framework": "ICE",
            "impact": 8,
            "confidence": 5,
            "ease": 5,
            "total": 2.0,
        }

    def test_rice_total(self) -> None:
        score = ScoreInput.build(ScoreFramework.RICE, impact=5, confidence=8, reach=6, effort=4)
        assert score.total == pytest.approx(60.0)

    def test_compute_total_requires_framework_fields(self) -> None:
        with pytest.raises(ValueError):
            compute_total(ScoreFramework.ICE, impact=1, confidence=1)
        with pytest.raises(ValueError):
            compute_total(ScoreFramework.RICE, impact=1, confidence=1, reach=2, effort=0)

    def test_ice_rejects_rice_fields(self) -> None:
        with pytest.raises(ValidationError):
            ScoreInput(framework=ScoreFramework.ICE, impact=1, confidence=1, ease=1, reach=3, total=0.01)

    def test_rice_requires_reach_and_effort(self) -> None:
        with pytest.raises(ValidationError):
            ScoreInput(framework=ScoreFramework.RICE, impact=1, confidence=1, reach=3, total=1.0)

    def test_range_limits(self) -> None:
        with pytest.raises(ValidationError):
            ScoreInput.build("ICE", impact=11, confidence=5, ease=5)
        with pytest.raises(ValidationError):
            ScoreInput(framework=ScoreFramework.RICE, impact=1, confidence=1, reach=1, effort=0, total=1.0)

    def test_blank_notes_become_none(self) -> None:
        score = ScoreInput.build("ICE", impact=1, confidence=1, ease=1, notes="   ")
        assert score.notes is None

    def test_stored_score(self) -> None:
        score = Score.model_validate(
            {
                "id": "s1",
                "ideaId": "i1",
                "framework": "RICE",
                "impact": 5,
                "confidence": 5,
                "ease": None,
                "reach": 5,
                "effort": 5,
                "total": 25,
                "notes": None,
                "createdAt": "2025-09-16T08:00:00Z",
            }
        )
        assert score.idea_id == "i1"
        assert score.framework is ScoreFramework.RICE


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------


def test_create_idea_request_strips_and_limits_title() -> None:
    request = CreateIdeaRequest(title="  Meal kit for toddlers  ")
    assert request.to_payload() == {"title": "Meal kit for toddlers"}

    with pytest.raises(ValidationError):
        CreateIdeaRequest(title="   ")
    with pytest.raises(ValidationError):
        CreateIdeaRequest(title="x" * 101)


def test_update_idea_request_sends_only_set_fields() -> None:
    request = UpdateIdeaRequest.model_validate({"document_md": "# New", "is_archived": True})
    assert request.to_payload() == {"documentMd": "# New", "isArchived": True}

    with pytest.raises(ValidationError):
        UpdateIdeaRequest.model_validate({"owner_id": "someone-else"})
    with pytest.raises(ValidationError):
        UpdateIdeaRequest.model_validate({"phase": "launch"})


def test_list_ideas_request_params() -> None:
    assert ListIdeasRequest().to_params() == {}
    request = ListIdeasRequest.model_validate({"sort_by": "iceScore", "sort_order": "desc"})
    assert request.to_params() == {"sortBy": "iceScore", "sortOrder": "desc"}

    with pytest.raises(ValidationError):
        ListIdeasRequest.model_validate({"sort_by": "owner"})


def test_chat_request_requires_trailing_user_message() -> None:
    request = ChatRequest.model_validate(
        {
            "messages": [
                {"role": "user", "content": "Is this viable?"},
                {"role": "assistant", "content": "Tell me more."},
                {"role": "user", "content": "B2B SaaS for bakeries."},
            ]
        }
    )
    assert request.to_payload()["messages"][-1] == {"role": "user", "content": "B2B SaaS for bakeries."}

    with pytest.raises(ValidationError):
        ChatRequest.model_validate({"messages": []})
    with pytest.raises(ValidationError):
        ChatRequest(messages=[ChatMessage(role=ChatRole.ASSISTANT, content="hi")])


def test_create_version_request_keeps_content_verbatim() -> None:
    request = CreateVersionRequest(content="  # Spec\n\n", summary="Initial draft")
    assert request.to_payload() == {"content": "  # Spec\n\n", "changeType": "manual", "summary": "Initial draft"}

    with pytest.raises(ValidationError):
        CreateVersionRequest(content="x", change_type="rewrite")


def test_version_history_entry_without_content() -> None:
    version = DocumentVersion.model_validate(
        {"id": "v1", "changeType": "AI_INSERT", "summary": None, "createdAt": "2025-09-16T08:00:00Z"}
    )
    assert version.change_type is VersionChangeType.AI_INSERT
    assert version.content is None
