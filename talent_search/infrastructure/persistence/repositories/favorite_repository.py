"""PostgreSQL implementation of IFavoriteRepository."""

from typing import List, Optional, Sequence, Set

from sqlalchemy import String, cast, delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.sql import func

from talent_search.domain.entities.favorite import FavoriteRecord
from talent_search.domain.repositories.favorite_repository import IFavoriteRepository
from talent_search.infrastructure.persistence.mappers.record_mapper import FavoriteMapper
from talent_search.infrastructure.persistence.models.base import to_db_timestamp
from talent_search.infrastructure.persistence.models.favorite_table import RecruiterFavoriteTable
from talent_search.infrastructure.persistence.repositories.base import PostgresRepository

_PAIR_CONSTRAINT = "uq_recruiter_favorites_pair"


def _pair(recruiter_id: str, player_id: str):
    return (
        cast(RecruiterFavoriteTable.recruiter_id, String) == recruiter_id,
        cast(RecruiterFavoriteTable.player_id, String) == player_id,
    )


class PostgresFavoriteRepository(PostgresRepository, IFavoriteRepository):
    """
    Uniqueness of (recruiter_id, player_id) is enforced by the database, so
    concurrent writers in different processes converge on one row.
    """

    def _values(self, record: FavoriteRecord) -> dict:
        return {
            "recruiter_id": record.recruiter_id,
            "player_id": record.player_id,
            "notes": record.notes,
            "tags": list(record.tags),
            "created_at": to_db_timestamp(record.created_at),
            "updated_at": to_db_timestamp(record.updated_at),
        }

    async def add(self, record: FavoriteRecord) -> FavoriteRecord:
        async with self.session("add favorite") as session:
            stmt = (
                insert(RecruiterFavoriteTable)
                .values(**self._values(record))
                .on_conflict_do_nothing(constraint=_PAIR_CONSTRAINT)
            )
            await session.execute(stmt)
            result = await session.execute(
                select(RecruiterFavoriteTable).where(*_pair(record.recruiter_id, record.player_id))
            )
            return FavoriteMapper.to_domain(result.scalars().one())

    async def upsert(self, record: FavoriteRecord) -> FavoriteRecord:
        async with self.session("upsert favorite") as session:
            stmt = insert(RecruiterFavoriteTable).values(**self._values(record))
            stmt = stmt.on_conflict_do_update(
                constraint=_PAIR_CONSTRAINT,
                set_={
                    "notes": stmt.excluded.notes,
                    "tags": stmt.excluded.tags,
                    "updated_at": func.now(),
                },
            ).returning(RecruiterFavoriteTable)
            result = await session.execute(stmt)
            return FavoriteMapper.to_domain(result.scalars().one())

    async def remove(self, recruiter_id: str, player_id: str) -> bool:
        async with self.session("remove favorite") as session:
            result = await session.execute(
                delete(RecruiterFavoriteTable).where(*_pair(recruiter_id, player_id))
            )
            return (result.rowcount or 0) > 0

    async def get(self, recruiter_id: str, player_id: str) -> Optional[FavoriteRecord]:
        async with self.session("load favorite") as session:
            result = await session.execute(
                select(RecruiterFavoriteTable).where(*_pair(recruiter_id, player_id))
            )
            row = result.scalars().first()
            return FavoriteMapper.to_domain(row) if row else None

    async def list_for_recruiter(self, recruiter_id: str) -> List[FavoriteRecord]:
        async with self.session("list favorites") as session:
            result = await session.execute(
                select(RecruiterFavoriteTable)
                .where(cast(RecruiterFavoriteTable.recruiter_id, String) == recruiter_id)
                .order_by(RecruiterFavoriteTable.created_at.desc(), RecruiterFavoriteTable.player_id)
            )
            return [FavoriteMapper.to_domain(row) for row in result.scalars().all()]

    async def favorited_among(self, recruiter_id: str, player_ids: Sequence[str]) -> Set[str]:
        ids = list(dict.fromkeys(player_ids))
        if not ids:
            return set()
        async with self.session("look up favorites") as session:
            result = await session.execute(
                select(RecruiterFavoriteTable.player_id)
                .where(cast(RecruiterFavoriteTable.recruiter_id, String) == recruiter_id)
                .where(cast(RecruiterFavoriteTable.player_id, String).in_(ids))
            )
            return {str(player_id) for player_id in result.scalars().all()}
