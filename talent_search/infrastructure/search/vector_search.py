"""
Vector Search Service

Nearest-neighbour retrieval over player embeddings:
- Cosine similarity through the embedding repository (pgvector)
- Over-fetching so structured filters still fill a page
- Deadline per query, classified failures
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import structlog

from talent_search.core.config import get_settings
from talent_search.domain.exceptions import (
    DomainException,
    IndexUnavailableError,
    InvalidInputError,
    PersistenceError,
)
from talent_search.domain.interfaces import IHealthCheck
from talent_search.domain.repositories.embedding_repository import IPlayerEmbeddingRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class VectorMatch:
    """Candidate player id with its similarity to the query vector"""
    player_id: str
    similarity: float


class VectorSearchService(IHealthCheck):
    """
    Similarity search against the player embedding index.

    Results are ordered by descending similarity with ties broken by player
    id, filtered to ``similarity >= min_similarity`` and capped at
    ``limit * VECTOR_OVER_FETCH_FACTOR``.
    """

    def __init__(
        self,
        repository: IPlayerEmbeddingRepository,
        over_fetch_factor: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.settings = get_settings()
        self.repository = repository
        self.over_fetch_factor = over_fetch_factor or self.settings.VECTOR_OVER_FETCH_FACTOR
        self.timeout_seconds = timeout_seconds or self.settings.VECTOR_SEARCH_TIMEOUT_SECONDS
        self._metrics = {
            "searches": 0,
            "failures": 0,
            "timeouts": 0,
            "total_search_time_ms": 0,
        }

    async def query(
        self,
        vector: Sequence[float],
        limit: int,
        min_similarity: float,
    ) -> List[VectorMatch]:
        if limit < 1:
            raise InvalidInputError("limit must be positive")
        if not 0.0 <= min_similarity <= 1.0:
            raise InvalidInputError("min_similarity must be between 0 and 1")

        fetch_limit = limit * self.over_fetch_factor
        started = time.perf_counter()
        try:
            rows = await asyncio.wait_for(
                self.repository.similarity_search(vector, fetch_limit, min_similarity),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self._metrics["timeouts"] += 1
            logger.warning("Vector search timed out", timeout_seconds=self.timeout_seconds)
            raise IndexUnavailableError("Vector search timed out") from e
        except PersistenceError as e:
            self._metrics["failures"] += 1
            logger.warning("Vector index unavailable", error=str(e))
            raise IndexUnavailableError(f"Vector index unavailable: {e}") from e
        except DomainException:
            raise
        except Exception as e:
            # Driver-level failures (refused or dropped connections) arrive unwrapped
            self._metrics["failures"] += 1
            logger.warning("Vector index unavailable", error=str(e), error_type=type(e).__name__)
            raise IndexUnavailableError(f"Vector index unavailable: {e}") from e

        matches = [
            VectorMatch(player_id=player_id, similarity=min(max(float(similarity), 0.0), 1.0))
            for player_id, similarity in rows
        ]
        matches = [m for m in matches if m.similarity >= min_similarity]
        matches.sort(key=lambda m: (-m.similarity, m.player_id))
        matches = matches[:fetch_limit]

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self._metrics["searches"] += 1
        self._metrics["total_search_time_ms"] += elapsed_ms
        logger.debug(
            "Vector search completed",
            candidates=len(matches),
            fetch_limit=fetch_limit,
            min_similarity=min_similarity,
            search_time_ms=elapsed_ms,
        )
        return matches

    async def check_health(self) -> Dict[str, Any]:
        try:
            total = await self.repository.count()
        except PersistenceError as e:
            return {"status": "unhealthy", "error": str(e)}
        return {"status": "healthy", "indexed_players": total, "metrics": dict(self._metrics)}
