"""
Infrastructure persistence models module.

Table definitions separated from domain models and business logic.
"""

from talent_search.infrastructure.persistence.models.favorite_table import RecruiterFavoriteTable
from talent_search.infrastructure.persistence.models.player_analysis_table import PlayerAnalysisTable
from talent_search.infrastructure.persistence.models.player_embedding_table import PlayerEmbeddingTable
from talent_search.infrastructure.persistence.models.read_models import (
    CoachTable,
    FeatureEntitlementTable,
    GameTable,
    PlayerGameProfileTable,
    PlayerTable,
    SchoolTable,
    TeamTable,
)

# Tables created and migrated by this service
ENGINE_OWNED_TABLES = [
    PlayerEmbeddingTable.__table__,
    RecruiterFavoriteTable.__table__,
    PlayerAnalysisTable.__table__,
]

__all__ = [
    "ENGINE_OWNED_TABLES",
    "CoachTable",
    "FeatureEntitlementTable",
    "GameTable",
    "PlayerAnalysisTable",
    "PlayerEmbeddingTable",
    "PlayerGameProfileTable",
    "PlayerTable",
    "RecruiterFavoriteTable",
    "SchoolTable",
    "TeamTable",
]
