"""Domain repository contract for persisted player analyses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from talent_search.domain.entities.analysis import StoredAnalysis


class IPlayerAnalysisRepository(ABC):

    @abstractmethod
    async def get(self, player_id: str, context_hash: str) -> Optional[StoredAnalysis]:
        raise NotImplementedError

    @abstractmethod
    async def save(self, stored: StoredAnalysis) -> None:
        """Insert or replace the analysis for (player_id, context_hash)."""
        raise NotImplementedError

    @abstractmethod
    async def delete_for_player(self, player_id: str) -> int:
        raise NotImplementedError
