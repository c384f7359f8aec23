"""Table <-> domain mappers."""

from talent_search.infrastructure.persistence.mappers.player_mapper import PlayerMapper
from talent_search.infrastructure.persistence.mappers.record_mapper import (
    AnalysisMapper,
    EmbeddingMapper,
    FavoriteMapper,
)

__all__ = ["AnalysisMapper", "EmbeddingMapper", "FavoriteMapper", "PlayerMapper"]
