"""Chat endpoints (history and streamed assistant replies)."""

from __future__ import annotations

from collections.abc import AsyncIterator

from idealauncher._api.ideas import idea_endpoint
from idealauncher._transport import Transport
from idealauncher.models.chat import ChatMessage
from idealauncher.models.requests import ChatRequest


async def fetch_chat_history(transport: Transport, idea_id: str) -> list[ChatMessage]:
    body = await transport.request("GET", idea_endpoint(idea_id, "/chat"))
    messages = body.get("messages") if isinstance(body, dict) else None
    return [ChatMessage.model_validate(item) for item in messages or []]


def stream_chat(transport: Transport, idea_id: str, request: ChatRequest) -> AsyncIterator[str]:
    """Stream the assistant's reply as text chunks."""
    return transport.stream("POST", idea_endpoint(idea_id, "/chat"), json=request.to_payload())
