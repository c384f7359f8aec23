"""Domain entities for the talent search engine."""

from talent_search.domain.entities.analysis import PlayerAnalysis, StoredAnalysis
from talent_search.domain.entities.embedding import (
    EmbeddingBatchResult,
    EmbeddingRefreshOptions,
    EmbeddingStats,
    PlayerEmbeddingRecord,
    RefreshMode,
)
from talent_search.domain.entities.favorite import FavoriteRecord, FavoriteToggleResult
from talent_search.domain.entities.player import (
    AcademicInfo,
    GameProfile,
    MainGameSummary,
    PlayerEmbeddingData,
    PlayerProfile,
    SchoolSummary,
    SchoolType,
)
from talent_search.domain.entities.recruiter import RecruiterProfile
from talent_search.domain.entities.search import (
    TalentSearchFilters,
    TalentSearchResponse,
    TalentSearchResult,
)

__all__ = [
    "AcademicInfo",
    "EmbeddingBatchResult",
    "EmbeddingRefreshOptions",
    "EmbeddingStats",
    "FavoriteRecord",
    "FavoriteToggleResult",
    "GameProfile",
    "MainGameSummary",
    "PlayerAnalysis",
    "StoredAnalysis",
    "PlayerEmbeddingData",
    "PlayerEmbeddingRecord",
    "PlayerProfile",
    "RecruiterProfile",
    "RefreshMode",
    "SchoolSummary",
    "SchoolType",
    "TalentSearchFilters",
    "TalentSearchResponse",
    "TalentSearchResult",
]
