"""Idea models."""

from __future__ import annotations

from datetime import datetime

from idealauncher.models._base import ApiEnum, ApiModel


class IdeaPhase(ApiEnum):
    IDEATION = "ideation"
    VALIDATION = "validation"
    SCORING = "scoring"
    MVP = "mvp"
    EXPORT = "export"
    UNKNOWN = "unknown"


class Idea(ApiModel):
    """A captured startup idea as returned by ``/api/ideas``."""

    id: str
    title: str
    one_liner: str | None = None
    document_md: str = ""
    """Working specification document (markdown/HTML)."""
    ice_score: float | None = None
    rice_score: float | None = None
    phase: IdeaPhase = IdeaPhase.IDEATION
    is_archived: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VersionChangeType(ApiEnum):
    MANUAL = "manual"
    AI_INSERT = "ai_insert"
    AUTO_SAVE = "auto_save"
    UNKNOWN = "unknown"


class DocumentVersion(ApiModel):
    """A saved snapshot of an idea's document.

    The history listing omits ``content``; it is only present on the
    version returned by a create.
    """

    id: str
    idea_id: str | None = None
    change_type: VersionChangeType = VersionChangeType.MANUAL
    summary: str | None = None
    content: str | None = None
    created_at: datetime | None = None


class TitleAvailability(ApiModel):
    is_unique: bool
    message: str = ""
