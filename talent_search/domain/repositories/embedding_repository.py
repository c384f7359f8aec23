"""Domain repository contract for player embedding vectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

from talent_search.domain.entities.embedding import PlayerEmbeddingRecord


class IPlayerEmbeddingRepository(ABC):
    """Vector store keyed by player id."""

    @abstractmethod
    async def save(self, record: PlayerEmbeddingRecord) -> None:
        """Write vector, text and source hash in one atomic upsert."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, player_id: str) -> Optional[PlayerEmbeddingRecord]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, player_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def get_source_hashes(self, player_ids: Sequence[str]) -> Dict[str, str]:
        """Stored source hash per player id; players without a vector are absent."""
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def similarity_search(
        self,
        vector: Sequence[float],
        limit: int,
        min_similarity: float,
    ) -> List[Tuple[str, float]]:
        """
        Nearest neighbours by cosine similarity.

        Returns (player_id, similarity) pairs with similarity >= min_similarity,
        best first, at most ``limit`` of them.
        """
        raise NotImplementedError
