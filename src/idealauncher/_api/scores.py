"""Scoring endpoints.

Endpoints:
  - GET  /api/ideas/{id}/score  (all scores, newest first)
  - POST /api/ideas/{id}/score  (store a score; updates the idea's ICE/RICE total)
"""

from __future__ import annotations

from idealauncher._api.ideas import idea_endpoint
from idealauncher._transport import Transport
from idealauncher.exceptions import ApiError, ErrorType
from idealauncher.models.score import Score, ScoreInput


async def fetch_scores(transport: Transport, idea_id: str) -> list[Score]:
    body = await transport.request("GET", idea_endpoint(idea_id, "/score"))
    scores = body.get("scores") if isinstance(body, dict) else None
    return [Score.model_validate(item) for item in scores or []]


async def submit_score(transport: Transport, idea_id: str, score: ScoreInput) -> Score:
    endpoint = idea_endpoint(idea_id, "/score")
    body = await transport.request("POST", endpoint, json=score.to_payload())
    stored = body.get("score") if isinstance(body, dict) else None
    if not isinstance(stored, dict):
        raise ApiError(f"Missing 'score' in response from {endpoint}", 500, ErrorType.SERVER, endpoint=endpoint)
    return Score.model_validate(stored)
