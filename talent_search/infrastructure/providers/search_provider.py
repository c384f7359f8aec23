"""Providers for search and application services."""

from __future__ import annotations

import asyncio
from typing import Optional

from talent_search.application.analysis_service import PlayerAnalysisService
from talent_search.application.dependencies import TalentSearchDependencies
from talent_search.application.embedding_refresh_service import EmbeddingRefreshService
from talent_search.application.favorite_service import FavoriteLedgerService
from talent_search.application.search.talent_search_service import TalentSearchService
from talent_search.core.config import get_settings
from talent_search.domain.services import FilterEngine, RankingWeights, RankNormalizer, RelevanceRanker
from talent_search.infrastructure.providers.ai_provider import (
    get_analysis_cache,
    get_analysis_generator,
    get_embedding_service,
)
from talent_search.infrastructure.providers.repository_provider import (
    get_embedding_repository,
    get_entitlement_service,
    get_favorite_repository,
    get_player_repository,
    get_recruiter_repository,
)
from talent_search.infrastructure.search.vector_search import VectorSearchService

_vector_search_service: Optional[VectorSearchService] = None
_favorite_service: Optional[FavoriteLedgerService] = None
_talent_search_service: Optional[TalentSearchService] = None
_analysis_service: Optional[PlayerAnalysisService] = None
_refresh_service: Optional[EmbeddingRefreshService] = None

_vector_lock = asyncio.Lock()
_favorite_lock = asyncio.Lock()
_search_lock = asyncio.Lock()
_analysis_lock = asyncio.Lock()
_refresh_lock = asyncio.Lock()


async def get_vector_search_service() -> VectorSearchService:
    """Return singleton vector search service."""
    global _vector_search_service

    if _vector_search_service is not None:
        return _vector_search_service

    async with _vector_lock:
        if _vector_search_service is None:
            repository = await get_embedding_repository()
            _vector_search_service = VectorSearchService(repository=repository)
        return _vector_search_service


async def get_favorite_service() -> FavoriteLedgerService:
    """Return the favorites ledger; one instance so per-pair locks are shared."""
    global _favorite_service

    if _favorite_service is not None:
        return _favorite_service

    async with _favorite_lock:
        if _favorite_service is None:
            repository = await get_favorite_repository()
            _favorite_service = FavoriteLedgerService(repository=repository)
        return _favorite_service


async def get_talent_search_service() -> TalentSearchService:
    """Return singleton talent search service."""
    global _talent_search_service

    if _talent_search_service is not None:
        return _talent_search_service

    async with _search_lock:
        if _talent_search_service is not None:
            return _talent_search_service

        settings = get_settings()
        embedding_service = await get_embedding_service()
        normalizer = RankNormalizer()
        dependencies = TalentSearchDependencies(
            player_repository=await get_player_repository(),
            recruiter_repository=await get_recruiter_repository(),
            favorite_service=await get_favorite_service(),
            embedding_provider=embedding_service,
            vector_search=await get_vector_search_service() if embedding_service else None,
            entitlement_service=await get_entitlement_service(),
            filter_engine=FilterEngine(rank_normalizer=normalizer),
            ranker=RelevanceRanker(
                RankingWeights(
                    similarity_weight=settings.RANKING_SIMILARITY_WEIGHT,
                    game_match_boost=settings.RANKING_GAME_MATCH_BOOST,
                )
            ),
        )
        _talent_search_service = TalentSearchService(dependencies)
        return _talent_search_service


async def get_analysis_service() -> Optional[PlayerAnalysisService]:
    """Return player analysis service, or None when no generator is configured."""
    global _analysis_service

    if _analysis_service is not None:
        return _analysis_service

    async with _analysis_lock:
        if _analysis_service is not None:
            return _analysis_service

        generator = await get_analysis_generator()
        if generator is None:
            return None
        _analysis_service = PlayerAnalysisService(
            player_repository=await get_player_repository(),
            recruiter_repository=await get_recruiter_repository(),
            generator=generator,
            cache=await get_analysis_cache(),
        )
        return _analysis_service


async def get_embedding_refresh_service() -> EmbeddingRefreshService:
    """Return embedding refresh service; unconfigured when OpenAI is absent."""
    global _refresh_service

    if _refresh_service is not None:
        return _refresh_service

    async with _refresh_lock:
        if _refresh_service is None:
            _refresh_service = EmbeddingRefreshService(
                player_repository=await get_player_repository(),
                embedding_repository=await get_embedding_repository(),
                embedding_provider=await get_embedding_service(),
            )
        return _refresh_service


async def reset_search_services() -> None:
    """Reset cached search service instances (for testing)."""
    global _vector_search_service, _favorite_service, _talent_search_service
    global _analysis_service, _refresh_service

    _vector_search_service = None
    _favorite_service = None
    _talent_search_service = None
    _analysis_service = None
    _refresh_service = None


__all__ = [
    "get_vector_search_service",
    "get_favorite_service",
    "get_talent_search_service",
    "get_analysis_service",
    "get_embedding_refresh_service",
    "reset_search_services",
]
