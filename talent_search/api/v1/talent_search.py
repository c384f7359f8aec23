"""
Talent Search API Endpoints

Recruiter-facing talent discovery:
- Semantic and filter-only player search with relevance ranking
- Recruiter-personalized player analysis
- Favorites ledger
- Admin embedding maintenance and coverage stats
"""

from typing import NoReturn

import structlog
from fastapi import APIRouter, HTTPException

from talent_search.api.converters import (
    analysis_to_response,
    batch_result_to_response,
    build_filters,
    build_refresh_options,
    embedding_record_to_response,
    favorite_to_response,
    search_response_to_response,
    stats_to_response,
)
from talent_search.api.dependencies import (
    AdminDep,
    AnalysisServiceDep,
    FavoriteServiceDep,
    RecruiterDep,
    RefreshServiceDep,
    SearchPrincipalDep,
    SearchServiceDep,
    map_domain_exception_to_http,
)
from talent_search.api.schemas.talent_search_schemas import (
    AvailabilityResponse,
    EmbeddingRefreshRequest,
    EmbeddingRefreshResponse,
    EmbeddingStatsResponse,
    FavoriteListResponse,
    FavoriteRemoveResponse,
    FavoriteResponse,
    FavoriteToggleResponse,
    FavoriteUpsertRequest,
    PlayerAnalysisResponse,
    PlayerEmbeddingDeleteResponse,
    PlayerEmbeddingResponse,
    TalentSearchRequest,
    TalentSearchResponseModel,
)
from talent_search.core.config import get_settings
from talent_search.domain.exceptions import AnalysisUnavailableError, DomainException

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/talent-search", tags=["talent-search"])
settings = get_settings()


def _raise_unexpected(operation: str, exc: Exception) -> NoReturn:
    logger.error("Talent search request failed", operation=operation, error=str(exc), exc_info=True)
    raise HTTPException(
        status_code=500,
        detail={
            "error": f"{operation}_failed",
            "message": "Request could not be completed",
            "details": str(exc) if settings.ENVIRONMENT in ("local", "development") else None,
        },
    )


@router.post("/search", response_model=TalentSearchResponseModel)
async def search_players(
    search_request: TalentSearchRequest,
    principal: SearchPrincipalDep,
    search_service: SearchServiceDep,
) -> TalentSearchResponseModel:
    """
    Search players with optional free-text query and structured filters.

    A query is applied semantically only when AI search is configured and
    the recruiter holds the premium search feature. When the semantic stage
    is unavailable the search falls back to filters only and the response
    carries ``degraded: true``.
    """
    try:
        filters = build_filters(search_request)
        response = await search_service.search(principal.id, filters)
        return search_response_to_response(response)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover - unexpected errors bubble to API layer
        _raise_unexpected("search", exc)


@router.get("/players/{player_id}/analysis", response_model=PlayerAnalysisResponse)
async def get_player_analysis(
    player_id: str,
    principal: SearchPrincipalDep,
    analysis_service: AnalysisServiceDep,
) -> PlayerAnalysisResponse:
    """Overview, pros and cons for a player, written for the calling recruiter."""
    try:
        if analysis_service is None:
            raise AnalysisUnavailableError("Player analysis is not configured")
        analysis = await analysis_service.get_for_recruiter(principal.id, player_id)
        return analysis_to_response(player_id, analysis)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("analysis", exc)


@router.post("/favorites/{player_id}/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    player_id: str,
    principal: RecruiterDep,
    favorite_service: FavoriteServiceDep,
) -> FavoriteToggleResponse:
    """Flip the favorite state of a player for the calling recruiter."""
    try:
        result = await favorite_service.toggle(principal.id, player_id)
        return FavoriteToggleResponse(player_id=result.player_id, favorited=result.favorited)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("favorite_toggle", exc)


@router.put("/favorites/{player_id}", response_model=FavoriteResponse)
async def upsert_favorite(
    player_id: str,
    favorite_request: FavoriteUpsertRequest,
    principal: RecruiterDep,
    favorite_service: FavoriteServiceDep,
) -> FavoriteResponse:
    """Favorite a player, or update notes and tags of an existing favorite."""
    try:
        record = await favorite_service.update_favorite(
            principal.id,
            player_id,
            notes=favorite_request.notes,
            tags=favorite_request.tags,
        )
        if record is None:
            record = await favorite_service.add_favorite(
                principal.id,
                player_id,
                notes=favorite_request.notes,
                tags=favorite_request.tags,
            )
        return favorite_to_response(record)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("favorite_upsert", exc)


@router.delete("/favorites/{player_id}", response_model=FavoriteRemoveResponse)
async def remove_favorite(
    player_id: str,
    principal: RecruiterDep,
    favorite_service: FavoriteServiceDep,
) -> FavoriteRemoveResponse:
    """Remove a favorite; removing a missing favorite is not an error."""
    try:
        removed = await favorite_service.remove_favorite(principal.id, player_id)
        return FavoriteRemoveResponse(player_id=player_id, removed=removed)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("favorite_remove", exc)


@router.get("/favorites", response_model=FavoriteListResponse)
async def list_favorites(
    principal: RecruiterDep,
    favorite_service: FavoriteServiceDep,
) -> FavoriteListResponse:
    """Favorites of the calling recruiter, newest first."""
    try:
        records = await favorite_service.list_favorite_records(principal.id)
        return FavoriteListResponse(
            player_ids=[record.player_id for record in records],
            favorites=[favorite_to_response(record) for record in records],
            total=len(records),
        )
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("favorite_list", exc)


@router.post("/embeddings/refresh", response_model=EmbeddingRefreshResponse)
async def refresh_embeddings(
    principal: AdminDep,
    refresh_service: RefreshServiceDep,
    refresh_request: EmbeddingRefreshRequest = EmbeddingRefreshRequest(),
) -> EmbeddingRefreshResponse:
    """Regenerate missing or stale player embeddings, or all of them with mode=force."""
    try:
        logger.info("Embedding refresh requested", admin_id=principal.id, mode=refresh_request.mode.value)
        result = await refresh_service.refresh(build_refresh_options(refresh_request))
        return batch_result_to_response(result)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("embedding_refresh", exc)


@router.post("/embeddings/players/{player_id}", response_model=PlayerEmbeddingResponse)
async def refresh_player_embedding(
    player_id: str,
    principal: AdminDep,
    refresh_service: RefreshServiceDep,
    analysis_service: AnalysisServiceDep,
) -> PlayerEmbeddingResponse:
    """Regenerate one player's embedding and drop analyses written for the old profile."""
    try:
        record = await refresh_service.refresh_player(player_id)
        invalidated = await analysis_service.invalidate_player(player_id) if analysis_service else 0
        return embedding_record_to_response(record, analyses_invalidated=invalidated)
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("player_embedding_refresh", exc)


@router.delete("/embeddings/players/{player_id}", response_model=PlayerEmbeddingDeleteResponse)
async def delete_player_embedding(
    player_id: str,
    principal: AdminDep,
    refresh_service: RefreshServiceDep,
    analysis_service: AnalysisServiceDep,
) -> PlayerEmbeddingDeleteResponse:
    """Remove one player's embedding and cached analyses; deleting a missing embedding is not an error."""
    try:
        deleted = await refresh_service.delete_player_embedding(player_id)
        invalidated = await analysis_service.invalidate_player(player_id) if analysis_service else 0
        logger.info("Player embedding delete requested", admin_id=principal.id, player_id=player_id, deleted=deleted)
        return PlayerEmbeddingDeleteResponse(
            player_id=player_id,
            deleted=deleted,
            analyses_invalidated=invalidated,
        )
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("player_embedding_delete", exc)


@router.get("/embeddings/stats", response_model=EmbeddingStatsResponse)
async def get_embedding_stats(
    principal: AdminDep,
    refresh_service: RefreshServiceDep,
) -> EmbeddingStatsResponse:
    """Embedding coverage across all players."""
    try:
        return stats_to_response(await refresh_service.get_stats())
    except DomainException as domain_exc:
        raise map_domain_exception_to_http(domain_exc)
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover
        _raise_unexpected("embedding_stats", exc)


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    principal: SearchPrincipalDep,
    search_service: SearchServiceDep,
    analysis_service: AnalysisServiceDep,
) -> AvailabilityResponse:
    """Whether AI-powered search and analysis are configured on this deployment."""
    return AvailabilityResponse(
        semantic_search_configured=search_service.deps.semantic_available,
        analysis_configured=analysis_service is not None,
    )
