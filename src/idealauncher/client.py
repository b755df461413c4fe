"""High-level async client for the IdeaLauncher API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from typing import Any

import aiohttp

from idealauncher._api import chat as _chat_api
from idealauncher._api import ideas as _ideas_api
from idealauncher._api import insights as _insights_api
from idealauncher._api import scores as _scores_api
from idealauncher._transport import HttpTransport, Transport
from idealauncher.config import IdeaLauncherConfig
from idealauncher.exceptions import ApiError, IdeaLauncherError
from idealauncher.models.chat import ChatMessage
from idealauncher.models.idea import DocumentVersion, Idea, TitleAvailability, VersionChangeType
from idealauncher.models.insights import DomainStatus, Feature, FindingUpdate, ResearchType, SpecExport
from idealauncher.models.requests import (
    ChatRequest,
    CreateIdeaRequest,
    CreateVersionRequest,
    ListIdeasRequest,
    UpdateIdeaRequest,
    ValidateTitleRequest,
)
from idealauncher.models.score import Score, ScoreInput
from idealauncher.state import keys
from idealauncher.state.bindings import OptimisticIdeas, optimistic_document, optimistic_score
from idealauncher.state.cache import CacheJanitor, SharedCache, with_cache
from idealauncher.state.optimistic import Optimistic

_logger = logging.getLogger(__name__)


class IdeaLauncherClient:
    """Async client for the IdeaLauncher API.

    Reads go through the shared cache; writes invalidate the entries they
    affect. Optimistic bindings created here share the same cache.

    Usage::

        async with IdeaLauncherClient(IdeaLauncherConfig.from_env()) as client:
            ideas = await client.list_ideas(sort_by="iceScore", sort_order="desc")
            doc = client.document(ideas[0].id, ideas[0].document_md)
            await client.save_document(doc, ideas[0].id, "# Updated")
    """

    _IDEA_TTL_S: float = 5 * 60
    _CHAT_TTL_S: float = 10 * 60
    _RESEARCH_TTL_S: float = 30 * 60
    _SCORES_TTL_S: float = 5 * 60
    _FEATURES_TTL_S: float = 15 * 60
    _EXPORTS_TTL_S: float = 5 * 60
    _DOMAINS_TTL_S: float = 60 * 60
    _VERSIONS_TTL_S: float = 5 * 60

    def __init__(
        self,
        config: IdeaLauncherConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        cache: SharedCache | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._cache = cache if cache is not None else SharedCache(default_ttl=config.cache_ttl)
        self._janitor = CacheJanitor(self._cache, config.cache_cleanup_interval)
        self._transport: Transport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> IdeaLauncherClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        self._janitor.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._janitor.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    @property
    def cache(self) -> SharedCache:
        return self._cache

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise IdeaLauncherError("Client not initialized. Use 'async with IdeaLauncherClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Ideas
    # ------------------------------------------------------------------

    async def list_ideas(self, *, sort_by: str | None = None, sort_order: str | None = None) -> list[Idea]:
        request = ListIdeasRequest.model_validate({"sort_by": sort_by, "sort_order": sort_order})
        return await _ideas_api.list_ideas(self._require_transport(), request)

    async def create_idea(self, title: str, one_liner: str | None = None) -> Idea:
        request = CreateIdeaRequest(title=title, one_liner=one_liner)
        return await _ideas_api.create_idea(self._require_transport(), request)

    async def get_idea(self, idea_id: str) -> Idea:
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.idea(idea_id),
            lambda: _ideas_api.fetch_idea(transport, idea_id),
            self._IDEA_TTL_S,
        )

    async def update_idea(self, idea_id: str, **fields: Any) -> Idea:
        """Patch an idea; accepts ``title``, ``one_liner``, ``document_md``, ``phase``, ``is_archived``."""
        request = UpdateIdeaRequest.model_validate(fields)
        result = await _ideas_api.update_idea(self._require_transport(), idea_id, request)
        keys.invalidate_idea(self._cache, idea_id)
        return result

    async def delete_idea(self, idea_id: str) -> None:
        await _ideas_api.delete_idea(self._require_transport(), idea_id)
        keys.invalidate_idea(self._cache, idea_id)
        keys.invalidate_research(self._cache, idea_id)
        self._cache.delete(keys.versions(idea_id))

    async def validate_title(self, title: str, exclude_id: str | None = None) -> TitleAvailability:
        """Check whether *title* is free among the user's active ideas.

        Pass the edited idea's id as *exclude_id* so it does not clash
        with itself.
        """
        request = ValidateTitleRequest(title=title, exclude_id=exclude_id)
        return await _ideas_api.validate_title(self._require_transport(), request)

    # ------------------------------------------------------------------
    # Document versions
    # ------------------------------------------------------------------

    async def list_versions(self, idea_id: str) -> list[DocumentVersion]:
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.versions(idea_id),
            lambda: _ideas_api.list_versions(transport, idea_id),
            self._VERSIONS_TTL_S,
        )

    async def create_version(
        self,
        idea_id: str,
        content: str,
        change_type: VersionChangeType | str = VersionChangeType.MANUAL,
        summary: str | None = None,
    ) -> DocumentVersion:
        request = CreateVersionRequest(content=content, change_type=change_type, summary=summary)
        version = await _ideas_api.create_version(self._require_transport(), idea_id, request)
        self._cache.delete(keys.versions(idea_id))
        return version

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    async def get_chat_history(self, idea_id: str) -> list[ChatMessage]:
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.chat_history(idea_id),
            lambda: _chat_api.fetch_chat_history(transport, idea_id),
            self._CHAT_TTL_S,
        )

    def chat(
        self,
        idea_id: str,
        messages: Sequence[ChatMessage | Mapping[str, Any]],
    ) -> AsyncIterator[str]:
        """Send the conversation and stream the assistant's reply.

        The cached history is dropped before the request is sent, since
        the server stores both the new user message and the reply.
        """
        request = ChatRequest.model_validate({"messages": list(messages)})
        transport = self._require_transport()
        self._cache.delete(keys.chat_history(idea_id))
        return _chat_api.stream_chat(transport, idea_id, request)

    # ------------------------------------------------------------------
    # Research, MVP, tech and exports
    # ------------------------------------------------------------------

    async def research(self, idea_id: str, research_type: ResearchType | str) -> dict[str, Any]:
        research_type = ResearchType(research_type)
        result = await _insights_api.run_research(self._require_transport(), idea_id, research_type)
        self._cache.set(keys.research(idea_id, research_type.value), result, self._RESEARCH_TTL_S)
        return result

    async def mark_finding_inserted(self, idea_id: str, finding_id: str, inserted: bool = True) -> FindingUpdate:
        """Flag a research finding as inserted into (or removed from) the document."""
        result = await _insights_api.update_finding(
            self._require_transport(),
            idea_id,
            finding_id,
            is_inserted=inserted,
        )
        keys.invalidate_research(self._cache, idea_id)
        return result

    async def get_research(self, idea_id: str, research_type: ResearchType | str) -> dict[str, Any]:
        research_type = ResearchType(research_type)
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.research(idea_id, research_type.value),
            lambda: _insights_api.fetch_research(transport, idea_id, research_type),
            self._RESEARCH_TTL_S,
        )

    async def generate_mvp(self, idea_id: str) -> list[Feature]:
        features = await _insights_api.generate_features(self._require_transport(), idea_id)
        self._cache.set(keys.features(idea_id), features, self._FEATURES_TTL_S)
        return features

    async def get_features(self, idea_id: str) -> list[Feature]:
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.features(idea_id),
            lambda: _insights_api.fetch_features(transport, idea_id),
            self._FEATURES_TTL_S,
        )

    async def recommend_tech(self, idea_id: str) -> list[dict[str, Any]]:
        return await _insights_api.recommend_tech(self._require_transport(), idea_id)

    async def export(self, idea_id: str, export_format: str = "kiro") -> SpecExport:
        export = await _insights_api.create_export(self._require_transport(), idea_id, export_format)
        self._cache.set(keys.exports(idea_id), export, self._EXPORTS_TTL_S)
        return export

    async def get_latest_export(self, idea_id: str) -> SpecExport | None:
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.exports(idea_id),
            lambda: _insights_api.fetch_latest_export(transport, idea_id),
            self._EXPORTS_TTL_S,
        )

    async def check_domains(self, names: Iterable[str]) -> list[DomainStatus]:
        names = list(names)
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.domain_check(names),
            lambda: _insights_api.check_domains(transport, names),
            self._DOMAINS_TTL_S,
        )

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    async def score(self, idea_id: str, score: ScoreInput) -> Score:
        stored = await _scores_api.submit_score(self._require_transport(), idea_id, score)
        self._cache.delete(keys.scores(idea_id))
        keys.invalidate_idea(self._cache, idea_id)
        return stored

    async def get_scores(self, idea_id: str) -> list[Score]:
        transport = self._require_transport()
        return await with_cache(
            self._cache,
            keys.scores(idea_id),
            lambda: _scores_api.fetch_scores(transport, idea_id),
            self._SCORES_TTL_S,
        )

    # ------------------------------------------------------------------
    # Optimistic bindings
    # ------------------------------------------------------------------

    def document(self, idea_id: str, initial_content: str = "") -> Optimistic[str]:
        return optimistic_document(
            self._cache,
            idea_id,
            initial_content,
            revert_on_error=self._config.revert_on_error,
        )

    def score_binding(self, idea_id: str, initial_score: ScoreInput | None = None) -> Optimistic[ScoreInput]:
        return optimistic_score(
            self._cache,
            idea_id,
            initial_score,
            revert_on_error=self._config.revert_on_error,
        )

    def ideas_binding(self, user_id: str, initial_ideas: Iterable[Idea] = ()) -> OptimisticIdeas:
        return OptimisticIdeas(
            self._cache,
            user_id,
            initial_ideas,
            revert_on_error=self._config.revert_on_error,
        )

    async def save_document(
        self,
        binding: Optimistic[str],
        idea_id: str,
        content: str,
        *,
        change_type: VersionChangeType | str | None = None,
        summary: str | None = None,
    ) -> Idea | None:
        """Show *content* immediately, then persist it as the idea's document.

        Returns the updated idea, or ``None`` when the save failed (the
        binding's ``error`` holds the failure).

        With *change_type* set, a document version is recorded after a
        successful save. A failed version write is logged and does not
        undo the save.
        """
        binding.update_optimistic(lambda _current: content)
        idea = await binding.commit_update(
            lambda: self.update_idea(idea_id, document_md=content),
            lambda _idea, _current: content,
        )
        if idea is not None and change_type is not None:
            try:
                await self.create_version(idea_id, content, change_type, summary)
            except ApiError as exc:
                _logger.warning("Saved document for idea %s but failed to record a version: %s", idea_id, exc)
        return idea

    async def save_score(self, binding: Optimistic[ScoreInput], idea_id: str, score: ScoreInput) -> Score | None:
        """Show *score* immediately, then store it."""
        binding.update_optimistic(lambda _current: score)
        return await binding.commit_update(
            lambda: self.score(idea_id, score),
            lambda _stored, _current: score,
        )
