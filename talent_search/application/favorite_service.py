"""Recruiter favorites with idempotent toggle semantics."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Set

import structlog

from talent_search.domain.entities.favorite import FavoriteRecord, FavoriteToggleResult
from talent_search.domain.repositories.favorite_repository import IFavoriteRepository
from talent_search.utils.keyed_lock import KeyedLock

logger = structlog.get_logger(__name__)


class FavoriteLedgerService:
    """
    Tracks which players each recruiter has favorited.

    Mutations of one (recruiter, player) pair serialize on a per-pair lock, so
    concurrent toggles resolve to one final state. Unrelated pairs never wait
    on each other.
    """

    def __init__(self, repository: IFavoriteRepository, locks: Optional[KeyedLock] = None):
        self.repository = repository
        self._locks = locks or KeyedLock()

    async def toggle(self, recruiter_id: str, player_id: str) -> FavoriteToggleResult:
        async with self._locks.acquire((recruiter_id, player_id)):
            existing = await self.repository.get(recruiter_id, player_id)
            if existing is not None:
                await self.repository.remove(recruiter_id, player_id)
                favorited = False
            else:
                await self.repository.add(FavoriteRecord(recruiter_id=recruiter_id, player_id=player_id))
                favorited = True
        logger.info("Favorite toggled", recruiter_id=recruiter_id, player_id=player_id, favorited=favorited)
        return FavoriteToggleResult(player_id=player_id, favorited=favorited)

    async def add_favorite(
        self,
        recruiter_id: str,
        player_id: str,
        notes: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> FavoriteRecord:
        """Favorite a player, or replace notes and tags when already favorited."""
        now = datetime.utcnow()
        record = FavoriteRecord(
            recruiter_id=recruiter_id,
            player_id=player_id,
            created_at=now,
            updated_at=now,
            notes=notes,
            tags=list(tags or []),
        )
        async with self._locks.acquire((recruiter_id, player_id)):
            return await self.repository.upsert(record)

    async def update_favorite(
        self,
        recruiter_id: str,
        player_id: str,
        notes: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Optional[FavoriteRecord]:
        """Update notes and tags of an existing favorite; None when not favorited."""
        async with self._locks.acquire((recruiter_id, player_id)):
            existing = await self.repository.get(recruiter_id, player_id)
            if existing is None:
                return None
            updated = FavoriteRecord(
                recruiter_id=recruiter_id,
                player_id=player_id,
                created_at=existing.created_at,
                updated_at=datetime.utcnow(),
                notes=notes if notes is not None else existing.notes,
                tags=list(tags) if tags is not None else list(existing.tags),
            )
            return await self.repository.upsert(updated)

    async def remove_favorite(self, recruiter_id: str, player_id: str) -> bool:
        """Idempotent removal. Returns whether a favorite existed."""
        async with self._locks.acquire((recruiter_id, player_id)):
            removed = await self.repository.remove(recruiter_id, player_id)
        logger.info("Favorite removed", recruiter_id=recruiter_id, player_id=player_id, existed=removed)
        return removed

    async def is_favorited(self, recruiter_id: str, player_id: str) -> bool:
        return await self.repository.get(recruiter_id, player_id) is not None

    async def list_favorites(self, recruiter_id: str) -> Set[str]:
        return {record.player_id for record in await self.repository.list_for_recruiter(recruiter_id)}

    async def list_favorite_records(self, recruiter_id: str) -> List[FavoriteRecord]:
        return await self.repository.list_for_recruiter(recruiter_id)

    async def favorited_among(self, recruiter_id: str, player_ids: Sequence[str]) -> Set[str]:
        """Batched lookup used to annotate a result page."""
        if not player_ids:
            return set()
        return await self.repository.favorited_among(recruiter_id, player_ids)


__all__ = ["FavoriteLedgerService"]
