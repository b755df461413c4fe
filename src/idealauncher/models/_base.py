"""Base model and enum for IdeaLauncher API payloads.

Every response model inherits from :class:`ApiModel`, which maps the
service's camelCase keys to snake_case fields via ``alias_generator``
and ignores keys it does not declare.

Server-owned string enums inherit from :class:`ApiEnum`, which adds an
``UNKNOWN`` member and a ``_missing_`` hook so newer server values do
not fail validation.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiEnum(enum.StrEnum):
    """Base for server-owned string enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    """

    @classmethod
    def _missing_(cls, value: object) -> ApiEnum:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        unknown: ApiEnum = cls.UNKNOWN  # type: ignore[attr-defined]
        return unknown


class ApiModel(BaseModel):
    """Base for IdeaLauncher response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialise with camelCase keys, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RequestModel(BaseModel):
    """Base for client-side request validation (validate → normalize → send)."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
        validate_default=True,
        str_strip_whitespace=True,
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)
