"""Idea CRUD endpoints.

Endpoints:
  - GET    /api/ideas            (list, non-archived)
  - POST   /api/ideas            (create)
  - GET    /api/ideas/{id}       (fetch one)
  - PATCH  /api/ideas/{id}       (partial update)
  - DELETE /api/ideas/{id}       (delete)
  - GET    /api/ideas/{id}/versions  (last 20 document versions, newest first)
  - POST   /api/ideas/{id}/versions  (record a document version)
  - POST   /api/ideas/validate-title (case-insensitive title uniqueness)
"""

from __future__ import annotations

from typing import Any

from idealauncher._transport import Transport
from idealauncher.exceptions import ApiError, ErrorType
from idealauncher.models.idea import DocumentVersion, Idea, TitleAvailability
from idealauncher.models.requests import (
    CreateIdeaRequest,
    CreateVersionRequest,
    ListIdeasRequest,
    UpdateIdeaRequest,
    ValidateTitleRequest,
)

_IDEAS_ENDPOINT = "/api/ideas"
_VALIDATE_TITLE_ENDPOINT = "/api/ideas/validate-title"


def idea_endpoint(idea_id: str, suffix: str = "") -> str:
    return f"{_IDEAS_ENDPOINT}/{idea_id}{suffix}"


def _expect_object(body: Any, endpoint: str) -> dict[str, Any]:
    if not isinstance(body, dict) or not body:
        raise ApiError(f"Unexpected response from {endpoint}", 500, ErrorType.SERVER, endpoint=endpoint)
    return body


async def list_ideas(transport: Transport, request: ListIdeasRequest) -> list[Idea]:
    params = request.to_params()
    body = await transport.request("GET", _IDEAS_ENDPOINT, params=params or None)
    if not isinstance(body, list):
        raise ApiError(f"Expected a list from {_IDEAS_ENDPOINT}", 500, ErrorType.SERVER, endpoint=_IDEAS_ENDPOINT)
    return [Idea.model_validate(item) for item in body]


async def create_idea(transport: Transport, request: CreateIdeaRequest) -> Idea:
    body = await transport.request("POST", _IDEAS_ENDPOINT, json=request.to_payload())
    return Idea.model_validate(_expect_object(body, _IDEAS_ENDPOINT))


async def fetch_idea(transport: Transport, idea_id: str) -> Idea:
    endpoint = idea_endpoint(idea_id)
    body = await transport.request("GET", endpoint)
    return Idea.model_validate(_expect_object(body, endpoint))


async def update_idea(transport: Transport, idea_id: str, request: UpdateIdeaRequest) -> Idea:
    endpoint = idea_endpoint(idea_id)
    body = await transport.request("PATCH", endpoint, json=request.to_payload())
    return Idea.model_validate(_expect_object(body, endpoint))


async def delete_idea(transport: Transport, idea_id: str) -> None:
    await transport.request("DELETE", idea_endpoint(idea_id))


async def list_versions(transport: Transport, idea_id: str) -> list[DocumentVersion]:
    endpoint = idea_endpoint(idea_id, "/versions")
    body = await transport.request("GET", endpoint)
    if not isinstance(body, list):
        raise ApiError(f"Expected a list from {endpoint}", 500, ErrorType.SERVER, endpoint=endpoint)
    return [DocumentVersion.model_validate(item) for item in body]


async def create_version(transport: Transport, idea_id: str, request: CreateVersionRequest) -> DocumentVersion:
    endpoint = idea_endpoint(idea_id, "/versions")
    body = await transport.request("POST", endpoint, json=request.to_payload())
    return DocumentVersion.model_validate(_expect_object(body, endpoint))


async def validate_title(transport: Transport, request: ValidateTitleRequest) -> TitleAvailability:
    body = await transport.request("POST", _VALIDATE_TITLE_ENDPOINT, json=request.to_payload())
    return TitleAvailability.model_validate(_expect_object(body, _VALIDATE_TITLE_ENDPOINT))
