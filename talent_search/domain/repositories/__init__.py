"""Domain repository abstractions."""

from .analysis_repository import IPlayerAnalysisRepository
from .embedding_repository import IPlayerEmbeddingRepository
from .favorite_repository import IFavoriteRepository
from .player_repository import IPlayerRepository
from .recruiter_repository import IRecruiterRepository

__all__ = [
    "IPlayerAnalysisRepository",
    "IPlayerEmbeddingRepository",
    "IFavoriteRepository",
    "IPlayerRepository",
    "IRecruiterRepository",
]
