"""API layer converters between request/response schemas and domain entities."""

from talent_search.api.schemas.talent_search_schemas import (
    AcademicsResponse,
    EmbeddingRefreshRequest,
    EmbeddingRefreshResponse,
    EmbeddingStatsResponse,
    FavoriteResponse,
    GameProfileResponse,
    MainGameResponse,
    PlayerAnalysisResponse,
    PlayerEmbeddingResponse,
    SchoolResponse,
    TalentSearchRequest,
    TalentSearchResponseModel,
    TalentSearchResultResponse,
)
from talent_search.domain.entities import (
    EmbeddingBatchResult,
    EmbeddingRefreshOptions,
    EmbeddingStats,
    FavoriteRecord,
    GameProfile,
    PlayerAnalysis,
    PlayerEmbeddingRecord,
    TalentSearchFilters,
    TalentSearchResponse,
    TalentSearchResult,
)


def build_filters(request: TalentSearchRequest) -> TalentSearchFilters:
    """Translate a validated request into domain filters."""
    return TalentSearchFilters(
        query=request.query,
        game_id=request.game_id or None,
        class_years=frozenset(request.class_years),
        school_types=frozenset(request.school_types),
        locations=frozenset(request.locations),
        min_gpa=request.min_gpa,
        max_gpa=request.max_gpa,
        roles=frozenset(request.roles),
        rank_tiers=frozenset(request.rank_tiers),
        limit=request.limit,
        min_similarity=request.min_similarity,
    )


def game_profile_to_response(profile: GameProfile) -> GameProfileResponse:
    return GameProfileResponse(
        game_id=profile.game_id,
        game_name=profile.game_name,
        game_short_name=profile.game_short_name,
        username=profile.username,
        rank=profile.rank,
        rating=profile.rating,
        role=profile.role,
        agents=list(profile.agents),
        play_style=profile.play_style,
        combine_score=profile.combine_score,
        league_score=profile.league_score,
    )


def search_result_to_response(result: TalentSearchResult) -> TalentSearchResultResponse:
    main_game = result.main_game
    return TalentSearchResultResponse(
        player_id=result.player_id,
        first_name=result.first_name,
        last_name=result.last_name,
        username=result.username,
        display_name=result.display_name,
        image_url=result.image_url,
        location=result.location,
        bio=result.bio,
        school=SchoolResponse(
            id=result.school.id,
            name=result.school.name,
            type=result.school.type,
            state=result.school.state,
        ),
        academics=AcademicsResponse(
            class_year=result.academics.class_year,
            gpa=result.academics.gpa,
            graduation_date=result.academics.graduation_date,
            intended_major=result.academics.intended_major,
        ),
        main_game=MainGameResponse(
            id=main_game.id,
            name=main_game.name,
            short_name=main_game.short_name,
            icon_url=main_game.icon_url,
            color=main_game.color,
        ) if main_game else None,
        game_profiles=[game_profile_to_response(p) for p in result.game_profiles],
        similarity_score=result.similarity_score,
        is_favorited=result.is_favorited,
    )


def search_response_to_response(response: TalentSearchResponse) -> TalentSearchResponseModel:
    return TalentSearchResponseModel(
        results=[search_result_to_response(r) for r in response.results],
        total_count=response.total_count,
        query=response.query,
        semantic_applied=response.semantic_applied,
        degraded=response.degraded,
        degraded_reason=response.degraded_reason,
    )


def analysis_to_response(player_id: str, analysis: PlayerAnalysis) -> PlayerAnalysisResponse:
    return PlayerAnalysisResponse(
        player_id=player_id,
        overview=analysis.overview,
        pros=list(analysis.pros),
        cons=list(analysis.cons),
        generated_at=analysis.generated_at,
        is_cached=analysis.is_cached,
    )


def favorite_to_response(record: FavoriteRecord) -> FavoriteResponse:
    return FavoriteResponse(
        player_id=record.player_id,
        notes=record.notes,
        tags=list(record.tags),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def build_refresh_options(request: EmbeddingRefreshRequest) -> EmbeddingRefreshOptions:
    return EmbeddingRefreshOptions(
        mode=request.mode,
        batch_size=request.batch_size,
        batch_delay_ms=request.batch_delay_ms,
    )


def batch_result_to_response(result: EmbeddingBatchResult) -> EmbeddingRefreshResponse:
    return EmbeddingRefreshResponse(
        processed=result.processed,
        succeeded=result.succeeded,
        failed=result.failed,
        skipped=result.skipped,
        failed_ids=list(result.failed_ids),
    )


def embedding_record_to_response(
    record: PlayerEmbeddingRecord,
    analyses_invalidated: int = 0,
) -> PlayerEmbeddingResponse:
    return PlayerEmbeddingResponse(
        player_id=record.player_id,
        embedding_model=record.embedding_model,
        source_hash=record.source_hash,
        updated_at=record.updated_at,
        analyses_invalidated=analyses_invalidated,
    )


def stats_to_response(stats: EmbeddingStats) -> EmbeddingStatsResponse:
    return EmbeddingStatsResponse(
        total_embeddings=stats.total_embeddings,
        missing_embeddings=stats.missing_embeddings,
        total_players=stats.total_players,
        coverage_percent=stats.coverage_percent,
        is_configured=stats.is_configured,
    )
