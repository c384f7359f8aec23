"""Domain repository contract for recruiter favorites."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Set

from talent_search.domain.entities.favorite import FavoriteRecord


class IFavoriteRepository(ABC):
    """Persistence for (recruiter, player) favorites, unique on the pair."""

    @abstractmethod
    async def add(self, record: FavoriteRecord) -> FavoriteRecord:
        """
        Insert the favorite if absent.

        Idempotent: an existing row is returned unchanged.
        """
        raise NotImplementedError

    @abstractmethod
    async def upsert(self, record: FavoriteRecord) -> FavoriteRecord:
        """Insert the favorite or overwrite notes and tags of the existing row."""
        raise NotImplementedError

    @abstractmethod
    async def remove(self, recruiter_id: str, player_id: str) -> bool:
        """Delete the favorite. Returns False when nothing was deleted."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, recruiter_id: str, player_id: str) -> Optional[FavoriteRecord]:
        raise NotImplementedError

    @abstractmethod
    async def list_for_recruiter(self, recruiter_id: str) -> List[FavoriteRecord]:
        """Favorites of a recruiter, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def favorited_among(self, recruiter_id: str, player_ids: Sequence[str]) -> Set[str]:
        """Subset of player_ids the recruiter has favorited, in one query."""
        raise NotImplementedError
