"""ICE / RICE scoring models.

ICE total is ``impact * confidence * ease / 100`` (each 0-10, so the
total is 0-10). RICE total is ``reach * impact * confidence / effort``.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from idealauncher.models._base import ApiEnum, ApiModel


class ScoreFramework(ApiEnum):
    ICE = "ICE"
    RICE = "RICE"
    UNKNOWN = "unknown"


def compute_total(
    framework: ScoreFramework,
    *,
    impact: int,
    confidence: int,
    ease: int | None = None,
    reach: int | None = None,
    effort: int | None = None,
) -> float:
    if framework is ScoreFramework.ICE:
        if ease is None:
            raise ValueError("ease is required for ICE framework")
        return impact * confidence * ease / 100
    if framework is ScoreFramework.RICE:
        if reach is None or not effort:
            raise ValueError("reach and a non-zero effort are required for RICE framework")
        return reach * impact * confidence / effort
    raise ValueError(f"Unsupported scoring framework: {framework}")


class ScoreInput(ApiModel):
    """Score payload accepted by ``POST /api/ideas/{id}/score``."""

    framework: ScoreFramework
    impact: int = Field(ge=0, le=10)
    confidence: int = Field(ge=0, le=10)
    ease: int | None = Field(default=None, ge=0, le=10)
    reach: int | None = Field(default=None, ge=0, le=10)
    effort: int | None = Field(default=None, ge=1, le=10)
    total: float
    notes: str | None = None

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _check_framework_fields(self) -> ScoreInput:
        if self.framework is ScoreFramework.ICE:
            if self.ease is None:
                raise ValueError("Ease is required for ICE framework")
            if self.reach is not None or self.effort is not None:
                raise ValueError("Reach and effort are not valid for ICE framework")
        elif self.framework is ScoreFramework.RICE:
            if self.reach is None or self.effort is None:
                raise ValueError("Reach and effort are required for RICE framework")
            if self.ease is not None:
                raise ValueError("Ease is not valid for RICE framework")
        else:
            raise ValueError("framework must be ICE or RICE")
        return self

    @classmethod
    def build(
        cls,
        framework: ScoreFramework | str,
        *,
        impact: int,
        confidence: int,
        ease: int | None = None,
        reach: int | None = None,
        effort: int | None = None,
        notes: str | None = None,
    ) -> ScoreInput:
        """Create a score with its composite ``total`` computed."""
        framework = ScoreFramework(framework)
        total = compute_total(
            framework,
            impact=impact,
            confidence=confidence,
            ease=ease,
            reach=reach,
            effort=effort,
        )
        return cls(
            framework=framework,
            impact=impact,
            confidence=confidence,
            ease=ease,
            reach=reach,
            effort=effort,
            total=total,
            notes=notes,
        )


class Score(ScoreInput):
    """A stored score record."""

    id: str
    idea_id: str | None = None
    created_at: datetime | None = None
