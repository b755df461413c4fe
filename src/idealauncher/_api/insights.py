"""Research, MVP, tech-stack, export and domain-check endpoints.

Research payloads differ per research type (competitors, monetization,
naming) and are returned as plain dicts.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from idealauncher._api.ideas import idea_endpoint
from idealauncher._transport import Transport
from idealauncher.models.insights import DomainStatus, Feature, FindingUpdate, ResearchType, SpecExport

_DOMAIN_CHECK_ENDPOINT = "/api/domain-check"


def _as_dict(body: Any) -> dict[str, Any]:
    return body if isinstance(body, dict) else {}


async def run_research(transport: Transport, idea_id: str, research_type: ResearchType) -> dict[str, Any]:
    body = await transport.request(
        "POST",
        idea_endpoint(idea_id, "/research"),
        json={"type": research_type.value},
    )
    return _as_dict(body)


async def fetch_research(transport: Transport, idea_id: str, research_type: ResearchType) -> dict[str, Any]:
    body = await transport.request(
        "GET",
        idea_endpoint(idea_id, "/research"),
        params={"type": research_type.value},
    )
    return _as_dict(body)


async def update_finding(transport: Transport, idea_id: str, finding_id: str, *, is_inserted: bool) -> FindingUpdate:
    endpoint = idea_endpoint(idea_id, f"/research/{finding_id}")
    body = _as_dict(await transport.request("PATCH", endpoint, json={"isInserted": is_inserted}))
    return FindingUpdate.model_validate(body)


async def generate_features(transport: Transport, idea_id: str) -> list[Feature]:
    body = _as_dict(await transport.request("POST", idea_endpoint(idea_id, "/mvp")))
    return [Feature.model_validate(item) for item in body.get("features") or []]


async def fetch_features(transport: Transport, idea_id: str) -> list[Feature]:
    body = _as_dict(await transport.request("GET", idea_endpoint(idea_id, "/mvp")))
    return [Feature.model_validate(item) for item in body.get("features") or []]


async def recommend_tech(transport: Transport, idea_id: str) -> list[dict[str, Any]]:
    body = _as_dict(await transport.request("POST", idea_endpoint(idea_id, "/tech")))
    return list(body.get("recommendations") or [])


async def create_export(transport: Transport, idea_id: str, export_format: str) -> SpecExport:
    body = _as_dict(
        await transport.request("POST", idea_endpoint(idea_id, "/export"), json={"format": export_format})
    )
    export = dict(body.get("export") or {})
    # The generated text is also returned at the top level.
    if "content" not in export and "content" in body:
        export["content"] = body["content"]
    export.setdefault("format", export_format)
    return SpecExport.model_validate(export)


async def fetch_latest_export(transport: Transport, idea_id: str) -> SpecExport | None:
    body = _as_dict(await transport.request("GET", idea_endpoint(idea_id, "/export")))
    export = body.get("export")
    if not body.get("hasExport") or not isinstance(export, dict):
        return None
    return SpecExport.model_validate(export)


async def check_domains(transport: Transport, names: Sequence[str]) -> list[DomainStatus]:
    body = _as_dict(await transport.request("POST", _DOMAIN_CHECK_ENDPOINT, json={"domains": list(names)}))
    return [DomainStatus.model_validate(item) for item in body.get("results") or []]
