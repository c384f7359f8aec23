"""
Talent Search API Schemas

Request/response models for the recruiter-facing talent search surface:
- Search filters with strict validation (unknown fields rejected)
- Ranked player cards with favorite flags and degradation metadata
- Recruiter-personalized player analysis
- Favorites ledger and admin embedding maintenance
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from talent_search.domain.entities.embedding import (
    MAX_BATCH_DELAY_MS,
    MAX_BATCH_SIZE,
    MIN_BATCH_DELAY_MS,
    MIN_BATCH_SIZE,
    RefreshMode,
)
from talent_search.domain.entities.search import (
    DEFAULT_LIMIT,
    DEFAULT_MIN_SIMILARITY,
    MAX_GPA,
    MAX_LIMIT,
    MAX_QUERY_LENGTH,
    MIN_LIMIT,
)
from talent_search.domain.value_objects import SchoolType


class TalentSearchRequest(BaseModel):
    """Talent search request; every filter is optional."""

    query: Optional[str] = Field(
        None,
        max_length=MAX_QUERY_LENGTH,
        description="Free-text query; used only when semantic search is available and entitled"
    )
    game_id: Optional[str] = Field(None, description="Restrict to players with a profile for this game")
    class_years: List[str] = Field(default_factory=list, description="Accepted class years")
    school_types: List[SchoolType] = Field(default_factory=list, description="Accepted school types")
    locations: List[str] = Field(default_factory=list, description="Location tokens, any match")
    min_gpa: Optional[float] = Field(None, ge=0.0, le=MAX_GPA, description="Minimum GPA")
    max_gpa: Optional[float] = Field(None, ge=0.0, le=MAX_GPA, description="Maximum GPA")
    roles: List[str] = Field(default_factory=list, description="Accepted in-game roles")
    rank_tiers: List[str] = Field(default_factory=list, description="Accepted rank tiers for game_id")
    limit: int = Field(DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT, description="Maximum results")
    min_similarity: float = Field(
        DEFAULT_MIN_SIMILARITY,
        ge=0.0,
        le=1.0,
        description="Minimum semantic similarity"
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "query": "aggressive duelist who shot-calls",
                "game_id": "valorant",
                "class_years": ["2026"],
                "school_types": ["HIGH_SCHOOL"],
                "roles": ["Duelist"],
                "rank_tiers": ["Diamond"],
                "min_gpa": 3.0,
                "limit": 20,
            }
        }
    )

    @field_validator("class_years", "locations", "roles", "rank_tiers")
    @classmethod
    def strip_blank_values(cls, values: List[str]) -> List[str]:
        return [value.strip() for value in values if value and value.strip()]

    @model_validator(mode="after")
    def validate_gpa_range(self) -> "TalentSearchRequest":
        if self.min_gpa is not None and self.max_gpa is not None and self.min_gpa > self.max_gpa:
            raise ValueError("min_gpa cannot exceed max_gpa")
        return self


class GameProfileResponse(BaseModel):
    game_id: str
    game_name: str
    game_short_name: Optional[str] = None
    username: Optional[str] = None
    rank: Optional[str] = None
    rating: Optional[float] = None
    role: Optional[str] = None
    agents: List[str] = Field(default_factory=list)
    play_style: Optional[str] = None
    combine_score: Optional[float] = None
    league_score: Optional[float] = None


class SchoolResponse(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[SchoolType] = None
    state: Optional[str] = None


class AcademicsResponse(BaseModel):
    class_year: Optional[str] = None
    gpa: Optional[float] = None
    graduation_date: Optional[date] = None
    intended_major: Optional[str] = None


class MainGameResponse(BaseModel):
    id: str
    name: str
    short_name: Optional[str] = None
    icon_url: Optional[str] = None
    color: Optional[str] = None


class TalentSearchResultResponse(BaseModel):
    """One player card in a search response."""

    player_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    display_name: str
    image_url: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    school: SchoolResponse
    academics: AcademicsResponse
    main_game: Optional[MainGameResponse] = None
    game_profiles: List[GameProfileResponse] = Field(default_factory=list)
    similarity_score: float = Field(..., ge=0.0, le=1.0)
    is_favorited: bool = False


class TalentSearchResponseModel(BaseModel):
    """Search response; ``degraded`` marks a filter-only fallback."""

    results: List[TalentSearchResultResponse] = Field(default_factory=list)
    total_count: int = Field(0, ge=0, description="Matches before truncation to limit")
    query: Optional[str] = Field(None, description="Query actually applied, if any")
    semantic_applied: bool = False
    degraded: bool = False
    degraded_reason: Optional[str] = None


class PlayerAnalysisResponse(BaseModel):
    player_id: str
    overview: str
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    generated_at: datetime
    is_cached: bool


class FavoriteToggleResponse(BaseModel):
    player_id: str
    favorited: bool


class FavoriteUpsertRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)
    tags: Optional[List[str]] = Field(None, max_length=20)

    model_config = ConfigDict(extra="forbid")


class FavoriteResponse(BaseModel):
    player_id: str
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class FavoriteListResponse(BaseModel):
    player_ids: List[str] = Field(default_factory=list)
    favorites: List[FavoriteResponse] = Field(default_factory=list)
    total: int = 0


class FavoriteRemoveResponse(BaseModel):
    player_id: str
    removed: bool


class EmbeddingRefreshRequest(BaseModel):
    mode: RefreshMode = RefreshMode.ONLY_MISSING
    batch_size: int = Field(10, ge=MIN_BATCH_SIZE, le=MAX_BATCH_SIZE)
    batch_delay_ms: int = Field(1000, ge=MIN_BATCH_DELAY_MS, le=MAX_BATCH_DELAY_MS)

    model_config = ConfigDict(extra="forbid")


class EmbeddingRefreshResponse(BaseModel):
    processed: int
    succeeded: int
    failed: int
    skipped: int
    failed_ids: List[str] = Field(default_factory=list)


class PlayerEmbeddingResponse(BaseModel):
    player_id: str
    embedding_model: str
    source_hash: str
    updated_at: datetime
    analyses_invalidated: int = 0


class PlayerEmbeddingDeleteResponse(BaseModel):
    player_id: str
    deleted: bool
    analyses_invalidated: int = 0


class EmbeddingStatsResponse(BaseModel):
    total_embeddings: int
    missing_embeddings: int
    total_players: int
    coverage_percent: float
    is_configured: bool


class AvailabilityResponse(BaseModel):
    semantic_search_configured: bool
    analysis_configured: bool


__all__ = [
    "TalentSearchRequest",
    "GameProfileResponse",
    "SchoolResponse",
    "AcademicsResponse",
    "MainGameResponse",
    "TalentSearchResultResponse",
    "TalentSearchResponseModel",
    "PlayerAnalysisResponse",
    "FavoriteToggleResponse",
    "FavoriteUpsertRequest",
    "FavoriteResponse",
    "FavoriteListResponse",
    "FavoriteRemoveResponse",
    "EmbeddingRefreshRequest",
    "EmbeddingRefreshResponse",
    "PlayerEmbeddingResponse",
    "PlayerEmbeddingDeleteResponse",
    "EmbeddingStatsResponse",
    "AvailabilityResponse",
]
