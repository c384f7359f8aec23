"""Domain-layer service interfaces.

These abstractions define the stable contracts that the application layer relies on,
while infrastructure adapters provide concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from talent_search.domain.entities.analysis import PlayerAnalysis
from talent_search.domain.entities.player import PlayerEmbeddingData
from talent_search.domain.value_objects import RecruiterContext


class IHealthCheck:
    """Health check interface mixin."""

    @abstractmethod
    async def check_health(self) -> Dict[str, Any]:
        """Return health check details."""
        pass


class IEmbeddingProvider(IHealthCheck, ABC):
    """Text to vector provider."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Identifier of the embedding model in use."""
        pass

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """
        Embed a single text.

        Raises InvalidInputError for empty or oversized text,
        ProviderUnavailableError for transport failures and
        ProviderTimeoutError when the deadline is exceeded.
        """
        pass

    @abstractmethod
    async def embed_batch(self, texts: Sequence[str]) -> List[Optional[List[float]]]:
        """Embed many texts preserving order; failed items are None."""
        pass


class IAnalysisGenerator(IHealthCheck, ABC):
    """Narrative analysis generator."""

    @abstractmethod
    async def generate(
        self,
        player: PlayerEmbeddingData,
        context: RecruiterContext,
    ) -> PlayerAnalysis:
        """Generate an analysis of the player written for the recruiter context."""
        pass


class IEntitlementService(IHealthCheck, ABC):
    """Billing / feature entitlement lookup."""

    @abstractmethod
    async def has_feature(self, principal_id: str, feature_key: str) -> bool:
        """Return True when the principal is entitled to the feature."""
        pass


class IAnalysisCache(IHealthCheck, ABC):
    """Keyed analysis cache with staleness and single-flight generation."""

    @abstractmethod
    async def get_or_generate(
        self,
        key: str,
        player_id: str,
        context_hash: str,
        source_hash: str,
        generate: Callable[[], Awaitable[PlayerAnalysis]],
    ) -> Tuple[PlayerAnalysis, bool]:
        """Return (analysis, cached). Concurrent callers of one key share a generation."""
        pass

    @abstractmethod
    async def invalidate_player(self, player_id: str) -> int:
        """Drop every cached analysis of a player and return how many were dropped."""
        pass


__all__ = [
    "IHealthCheck",
    "IEmbeddingProvider",
    "IAnalysisGenerator",
    "IEntitlementService",
    "IAnalysisCache",
]
