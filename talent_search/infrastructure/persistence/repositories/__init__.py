"""PostgreSQL repository implementations."""

from talent_search.infrastructure.persistence.repositories.analysis_repository import (
    PostgresPlayerAnalysisRepository,
)
from talent_search.infrastructure.persistence.repositories.embedding_repository import (
    PostgresPlayerEmbeddingRepository,
)
from talent_search.infrastructure.persistence.repositories.entitlement_repository import (
    PostgresEntitlementService,
)
from talent_search.infrastructure.persistence.repositories.favorite_repository import (
    PostgresFavoriteRepository,
)
from talent_search.infrastructure.persistence.repositories.player_repository import (
    PostgresPlayerRepository,
)
from talent_search.infrastructure.persistence.repositories.recruiter_repository import (
    PostgresRecruiterRepository,
)

__all__ = [
    "PostgresEntitlementService",
    "PostgresFavoriteRepository",
    "PostgresPlayerAnalysisRepository",
    "PostgresPlayerEmbeddingRepository",
    "PostgresPlayerRepository",
    "PostgresRecruiterRepository",
]
