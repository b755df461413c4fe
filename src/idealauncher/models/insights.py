"""Research, MVP, export and domain-check models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from idealauncher.models._base import ApiEnum, ApiModel


class ResearchType(ApiEnum):
    COMPETITORS = "competitors"
    MONETIZATION = "monetization"
    NAMING = "naming"
    UNKNOWN = "unknown"


class Feature(ApiModel):
    """An MVP feature generated for an idea."""

    id: str | None = None
    title: str
    description: str | None = None
    priority: str
    estimate: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class SpecExport(ApiModel):
    id: str | None = None
    format: str = "kiro"
    content: str
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None


class DomainStatus(ApiModel):
    domain: str
    available: bool
    status: str = "unknown"
    summary: str = "Unknown status"


class FindingUpdate(ApiModel):
    """Result of marking a research finding as inserted into the document."""

    id: str
    is_inserted: bool
