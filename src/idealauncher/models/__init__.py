"""Pydantic models for IdeaLauncher API payloads."""

from idealauncher.models.chat import ChatMessage, ChatRole
from idealauncher.models.idea import DocumentVersion, Idea, IdeaPhase, TitleAvailability, VersionChangeType
from idealauncher.models.insights import DomainStatus, Feature, FindingUpdate, ResearchType, SpecExport
from idealauncher.models.requests import (
    ChatRequest,
    CreateIdeaRequest,
    CreateVersionRequest,
    ListIdeasRequest,
    UpdateIdeaRequest,
    ValidateTitleRequest,
)
from idealauncher.models.score import Score, ScoreFramework, ScoreInput, compute_total

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatRole",
    "CreateIdeaRequest",
    "CreateVersionRequest",
    "DocumentVersion",
    "DomainStatus",
    "Feature",
    "FindingUpdate",
    "Idea",
    "IdeaPhase",
    "ListIdeasRequest",
    "ResearchType",
    "Score",
    "ScoreFramework",
    "ScoreInput",
    "SpecExport",
    "TitleAvailability",
    "UpdateIdeaRequest",
    "ValidateTitleRequest",
    "VersionChangeType",
    "compute_total",
]
