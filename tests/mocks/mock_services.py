"""
Mock service implementations for testing.

Deterministic stand-ins for the embedding provider, the analysis generator
and the entitlement service, with call tracking and failure switches.
"""

import asyncio
import hashlib
from typing import Any, Dict, List, Optional, Sequence, Set

from talent_search.domain.entities import PlayerAnalysis, PlayerEmbeddingData
from talent_search.domain.exceptions import (
    EntitlementUnavailableError,
    InvalidInputError,
    ProviderUnavailableError,
)
from talent_search.domain.interfaces import (
    IAnalysisGenerator,
    IEmbeddingProvider,
    IEntitlementService,
)
from talent_search.domain.value_objects import RecruiterContext


class MockEmbeddingProvider(IEmbeddingProvider):
    """
    Embeds text as a fixed vector when registered, otherwise as a stable
    pseudo-random vector derived from the text hash.
    """

    def __init__(self, dimension: int = 8):
        self.dimension = dimension
        self.vectors: Dict[str, List[float]] = {}
        self.call_log: List[tuple] = []
        self.fail_with: Optional[Exception] = None
        self.fail_texts: Set[str] = set()

    @property
    def model_name(self) -> str:
        return "mock-embedding"

    def register(self, text: str, vector: Sequence[float]) -> None:
        self.vectors[text] = list(vector)

    def _vector_for(self, text: str) -> List[float]:
        if text in self.vectors:
            return list(self.vectors[text])
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(byte / 255.0) + 0.01 for byte in digest[:self.dimension]]

    async def embed(self, text: str) -> List[float]:
        self.call_log.append(("embed", text))
        if not text or not text.strip():
            raise InvalidInputError("Text cannot be empty")
        if self.fail_with is not None:
            raise self.fail_with
        if text in self.fail_texts:
            raise ProviderUnavailableError("Mock provider failure")
        return self._vector_for(text)

    async def embed_batch(self, texts: Sequence[str]) -> List[Optional[List[float]]]:
        self.call_log.append(("embed_batch", len(texts)))
        if self.fail_with is not None:
            return [None] * len(texts)
        return [None if text in self.fail_texts else self._vector_for(text) for text in texts]

    async def check_health(self) -> Dict[str, Any]:
        return {"status": "healthy", "model": self.model_name}

    def get_call_count(self, method: str) -> int:
        return len([call for call in self.call_log if call[0] == method])


class MockAnalysisGenerator(IAnalysisGenerator):
    """Counts generations; optional delay to widen concurrency windows."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.call_count = 0
        self.contexts: List[RecruiterContext] = []
        self.fail_with: Optional[Exception] = None

    async def generate(self, player: PlayerEmbeddingData, context: RecruiterContext) -> PlayerAnalysis:
        self.call_count += 1
        self.contexts.append(context)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        audience = context.school_name or "a coach"
        return PlayerAnalysis(
            overview=f"{player.first_name or player.player_id} analysis for {audience} #{self.call_count}",
            pros=["Strong mechanics"],
            cons=["Limited team experience"],
        )

    async def check_health(self) -> Dict[str, Any]:
        return {"status": "healthy", "calls": self.call_count}


class MockEntitlementService(IEntitlementService):
    def __init__(self, entitled: Optional[Set[str]] = None):
        self.entitled: Set[str] = set(entitled or set())
        self.call_log: List[tuple] = []
        self.should_fail = False

    async def has_feature(self, principal_id: str, feature_key: str) -> bool:
        self.call_log.append(("has_feature", principal_id, feature_key))
        if self.should_fail:
            raise EntitlementUnavailableError("Mock entitlement failure")
        return principal_id in self.entitled

    async def check_health(self) -> Dict[str, Any]:
        return {"status": "healthy"}


__all__ = [
    "MockEmbeddingProvider",
    "MockAnalysisGenerator",
    "MockEntitlementService",
]
