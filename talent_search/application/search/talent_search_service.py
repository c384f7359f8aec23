"""
Talent Search Application Service

Query-to-result pipeline for recruiters:
- Entitlement gating of free-text (semantic) search
- Query embedding and vector retrieval with over-fetch
- Structured filters, relevance ranking and truncation
- Batched favorite annotation for the returned page
- Degradation to filter-only search when a semantic collaborator fails
"""

from __future__ import annotations

import time
from typing import Dict, List, Optional, Set, Tuple

import structlog

from talent_search.application.dependencies.talent_search_dependencies import TalentSearchDependencies
from talent_search.core.config import get_settings
from talent_search.domain.entities.player import PlayerProfile
from talent_search.domain.entities.search import (
    TalentSearchFilters,
    TalentSearchResponse,
    TalentSearchResult,
)
from talent_search.domain.exceptions import (
    CollaboratorUnavailableError,
    EntitlementUnavailableError,
    IndexUnavailableError,
    InvalidInputError,
    PersistenceError,
    ProviderTimeoutError,
    SearchFailedError,
)
from talent_search.domain.services.relevance_ranker import RankedCandidate
from talent_search.infrastructure.search.vector_search import VectorMatch

logger = structlog.get_logger(__name__)

DEGRADED_SEMANTIC_UNCONFIGURED = "semantic_search_unconfigured"
DEGRADED_ENTITLEMENT_UNAVAILABLE = "entitlement_unavailable"
DEGRADED_EMBEDDING_TIMEOUT = "embedding_timeout"
DEGRADED_EMBEDDING_UNAVAILABLE = "embedding_unavailable"
DEGRADED_INDEX_UNAVAILABLE = "vector_index_unavailable"


class TalentSearchService:
    """
    Public entry point of talent search.

    Only failures of the mandatory stages (player store, filters, ranking,
    favorites) fail a request, as SearchFailedError. Failures of the semantic
    stage switch the request to the filter-only pipeline and flag the
    response as degraded. A partial result list is never returned.
    """

    def __init__(self, dependencies: TalentSearchDependencies):
        self.settings = get_settings()
        self.deps = dependencies
        self._search_stats = {
            "total_searches": 0,
            "semantic_searches": 0,
            "filter_only_searches": 0,
            "degraded_searches": 0,
            "queries_dropped_unentitled": 0,
            "failed_searches": 0,
        }

    async def search(self, recruiter_id: str, filters: TalentSearchFilters) -> TalentSearchResponse:
        started = time.perf_counter()
        self._search_stats["total_searches"] += 1

        query = filters.effective_query
        matches: Optional[List[VectorMatch]] = None
        degraded_reason: Optional[str] = None

        if query:
            query, degraded_reason = await self._gate_query(recruiter_id, query)
        if query:
            matches, degraded_reason = await self._retrieve(query, filters)
            if matches is None:
                query = None

        semantic = matches is not None
        try:
            candidates = await self._load_candidates(filters, matches)
            filtered = self.deps.filter_engine.apply([player for player, _ in candidates], filters)
            similarity = {player.id: score for player, score in candidates}
            games_of_interest = await self._games_of_interest(recruiter_id, filters)
            ranked = self.deps.ranker.rank(
                [(player, similarity.get(player.id, 0.0)) for player in filtered],
                game_id=filters.game_id,
                games_of_interest=games_of_interest,
                semantic=semantic,
            )
            page = ranked[:filters.limit]
            favorites = await self.deps.favorite_service.favorited_among(
                recruiter_id, [c.player.id for c in page]
            )
        except SearchFailedError:
            self._search_stats["failed_searches"] += 1
            raise
        except Exception as e:
            self._search_stats["failed_searches"] += 1
            logger.error("Talent search failed", recruiter_id=recruiter_id, error=str(e), exc_info=True)
            raise SearchFailedError(f"Search failed: {e}") from e

        results = [self._to_result(candidate, candidate.player.id in favorites) for candidate in page]

        if semantic:
            self._search_stats["semantic_searches"] += 1
        else:
            self._search_stats["filter_only_searches"] += 1
        if degraded_reason:
            self._search_stats["degraded_searches"] += 1

        logger.info(
            "Talent search completed",
            recruiter_id=recruiter_id,
            semantic=semantic,
            degraded_reason=degraded_reason,
            total_count=len(ranked),
            returned=len(results),
            search_time_ms=int((time.perf_counter() - started) * 1000),
        )
        return TalentSearchResponse(
            results=results,
            total_count=len(ranked),
            query=query,
            semantic_applied=semantic,
            degraded=degraded_reason is not None,
            degraded_reason=degraded_reason,
        )

    async def _gate_query(self, recruiter_id: str, query: str) -> Tuple[Optional[str], Optional[str]]:
        """Return the query to run (None to drop it) and a degradation reason."""
        if not self.deps.semantic_available:
            logger.info("Semantic search not configured, running filter-only", recruiter_id=recruiter_id)
            return None, DEGRADED_SEMANTIC_UNCONFIGURED

        if not self.settings.ENTITLEMENT_GATING_ENABLED or self.deps.entitlement_service is None:
            return query, None

        try:
            entitled = await self.deps.entitlement_service.has_feature(
                recruiter_id, self.settings.PREMIUM_SEARCH_FEATURE_KEY
            )
        except EntitlementUnavailableError as e:
            logger.warning("Entitlement check unavailable, running filter-only", recruiter_id=recruiter_id, error=str(e))
            return None, DEGRADED_ENTITLEMENT_UNAVAILABLE

        if not entitled:
            self._search_stats["queries_dropped_unentitled"] += 1
            logger.info("Recruiter not entitled to semantic search, query dropped", recruiter_id=recruiter_id)
            return None, None
        return query, None

    async def _retrieve(
        self,
        query: str,
        filters: TalentSearchFilters,
    ) -> Tuple[Optional[List[VectorMatch]], Optional[str]]:
        try:
            vector = await self.deps.embedding_provider.embed(query)
            matches = await self.deps.vector_search.query(vector, filters.limit, filters.min_similarity)
        except CollaboratorUnavailableError as e:
            reason = _degradation_reason(e)
            logger.warning("Semantic retrieval unavailable, running filter-only", reason=reason, error=str(e))
            return None, reason
        except InvalidInputError as e:
            logger.warning("Embedding provider rejected query, running filter-only", error=str(e))
            return None, DEGRADED_EMBEDDING_UNAVAILABLE
        return matches, None

    async def _load_candidates(
        self,
        filters: TalentSearchFilters,
        matches: Optional[List[VectorMatch]],
    ) -> List[Tuple[PlayerProfile, float]]:
        try:
            if matches is None:
                players = await self.deps.player_repository.list_candidates(filters.game_id)
                return [(player, 0.0) for player in players]

            players = await self.deps.player_repository.get_by_ids([m.player_id for m in matches])
        except PersistenceError as e:
            raise SearchFailedError(f"Player store unavailable: {e}") from e

        by_id: Dict[str, PlayerProfile] = {player.id: player for player in players}
        return [(by_id[m.player_id], m.similarity) for m in matches if m.player_id in by_id]

    async def _games_of_interest(self, recruiter_id: str, filters: TalentSearchFilters) -> Set[str]:
        if filters.game_id:
            return {filters.game_id}
        try:
            profile = await self.deps.recruiter_repository.get_profile(recruiter_id)
        except PersistenceError as e:
            logger.warning("Recruiter games unavailable, ranking without game match", recruiter_id=recruiter_id, error=str(e))
            return set()
        return profile.games_of_interest() if profile else set()

    @staticmethod
    def _to_result(candidate: RankedCandidate, is_favorited: bool) -> TalentSearchResult:
        player = candidate.player
        return TalentSearchResult(
            player_id=player.id,
            first_name=player.first_name,
            last_name=player.last_name,
            username=player.username,
            display_name=player.display_name,
            image_url=player.image_url,
            location=player.location,
            bio=player.bio,
            school=player.school,
            academics=player.academics,
            main_game=player.main_game,
            game_profiles=list(player.game_profiles),
            similarity_score=candidate.similarity,
            is_favorited=is_favorited,
        )

    def get_stats(self) -> Dict[str, int]:
        return dict(self._search_stats)


def _degradation_reason(error: CollaboratorUnavailableError) -> str:
    if isinstance(error, IndexUnavailableError):
        return DEGRADED_INDEX_UNAVAILABLE
    if isinstance(error, ProviderTimeoutError):
        return DEGRADED_EMBEDDING_TIMEOUT
    return DEGRADED_EMBEDDING_UNAVAILABLE


__all__ = ["TalentSearchService"]
