"""Chat history models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from idealauncher.models._base import ApiEnum, ApiModel


class ChatRole(ApiEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ChatMessage(ApiModel):
    id: str | None = None
    role: ChatRole
    content: str
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None

    def to_prompt(self) -> dict[str, str]:
        """Shape sent to the chat endpoint: role and content only."""
        return {"role": self.role.value, "content": self.content}
