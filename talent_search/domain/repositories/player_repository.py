"""Domain repository contracts for the externally owned player store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from talent_search.domain.entities.player import PlayerProfile


class IPlayerRepository(ABC):
    """Read-only access to player profiles."""

    @abstractmethod
    async def get_by_id(self, player_id: str) -> Optional[PlayerProfile]:
        """Load one player with school, academics and game profiles."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_ids(self, player_ids: Sequence[str]) -> List[PlayerProfile]:
        """
        Load many players in one round trip.

        Unknown ids are skipped. Order of the returned list is unspecified.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_candidates(self, game_id: Optional[str] = None) -> List[PlayerProfile]:
        """Candidate pool for filter-only search, narrowed to a game when given."""
        raise NotImplementedError

    @abstractmethod
    async def list_player_ids(self) -> List[str]:
        """All player ids in a stable order."""
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError
