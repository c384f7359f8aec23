"""Dependency container for TalentSearchService."""

from dataclasses import dataclass, field
from typing import Optional

from talent_search.application.favorite_service import FavoriteLedgerService
from talent_search.domain.interfaces import IEmbeddingProvider, IEntitlementService
from talent_search.domain.repositories.player_repository import IPlayerRepository
from talent_search.domain.repositories.recruiter_repository import IRecruiterRepository
from talent_search.domain.services.filter_engine import FilterEngine
from talent_search.domain.services.relevance_ranker import RelevanceRanker
from talent_search.infrastructure.search.vector_search import VectorSearchService


@dataclass
class TalentSearchDependencies:
    """
    Container for search orchestrator dependencies.

    The semantic stage (embedding provider, vector search, entitlements) is
    optional; without it every search runs filter-only.
    """

    player_repository: IPlayerRepository
    recruiter_repository: IRecruiterRepository
    favorite_service: FavoriteLedgerService
    embedding_provider: Optional[IEmbeddingProvider] = None
    vector_search: Optional[VectorSearchService] = None
    entitlement_service: Optional[IEntitlementService] = None
    filter_engine: FilterEngine = field(default_factory=FilterEngine)
    ranker: RelevanceRanker = field(default_factory=RelevanceRanker)

    @property
    def semantic_available(self) -> bool:
        return self.embedding_provider is not None and self.vector_search is not None


__all__ = ["TalentSearchDependencies"]
