"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → normalize → send" flow.
They are used internally by :class:`idealauncher.client.IdeaLauncherClient`.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field, field_validator

from idealauncher.models._base import RequestModel
from idealauncher.models.chat import ChatMessage, ChatRole
from idealauncher.models.idea import IdeaPhase, VersionChangeType

SortField = Literal["title", "iceScore", "riceScore", "createdAt", "updatedAt"]
SortOrder = Literal["asc", "desc"]


class ListIdeasRequest(RequestModel):
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None

    def to_params(self) -> dict[str, str]:
        return {key: str(value) for key, value in self.to_payload().items()}


class CreateIdeaRequest(RequestModel):
    title: str = Field(min_length=1, max_length=100)
    one_liner: str | None = None


class UpdateIdeaRequest(RequestModel):
    """Partial update; only fields that were explicitly set are sent."""

    title: str | None = Field(default=None, min_length=1, max_length=100)
    one_liner: str | None = None
    document_md: str | None = None
    phase: IdeaPhase | None = None
    is_archived: bool | None = None

    @field_validator("phase")
    @classmethod
    def _known_phase(cls, value: IdeaPhase | None) -> IdeaPhase | None:
        if value is IdeaPhase.UNKNOWN:
            raise ValueError("phase must be one of ideation, validation, scoring, mvp, export")
        return value


class ChatRequest(RequestModel):
    messages: list[ChatMessage] = Field(min_length=1)

    @field_validator("messages")
    @classmethod
    def _last_message_from_user(cls, value: list[ChatMessage]) -> list[ChatMessage]:
        if value and value[-1].role is not ChatRole.USER:
            raise ValueError("last message must be from user")
        return value

    def to_payload(self) -> dict[str, Any]:
        return {"messages": [message.to_prompt() for message in self.messages]}


class CreateVersionRequest(RequestModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    content: str
    change_type: VersionChangeType = VersionChangeType.MANUAL
    summary: str | None = None

    @field_validator("change_type")
    @classmethod
    def _known_change_type(cls, value: VersionChangeType) -> VersionChangeType:
        if value is VersionChangeType.UNKNOWN:
            raise ValueError("change_type must be one of manual, ai_insert, auto_save")
        return value

    def to_payload(self) -> dict[str, Any]:
        # changeType is sent even when left at its default.
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ValidateTitleRequest(RequestModel):
    title: str = Field(min_length=1)
    exclude_id: str | None = None
