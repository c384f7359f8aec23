"""PostgreSQL read-side implementation of IPlayerRepository."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import String, cast, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from talent_search.domain.entities.player import PlayerProfile
from talent_search.domain.repositories.player_repository import IPlayerRepository
from talent_search.infrastructure.persistence.mappers.player_mapper import PlayerMapper
from talent_search.infrastructure.persistence.models.read_models import (
    GameTable,
    PlayerGameProfileTable,
    PlayerTable,
    SchoolTable,
)
from talent_search.infrastructure.persistence.repositories.base import PostgresRepository


def _game_matches(game: str):
    """Match a game on id, name or short name."""
    needle = game.strip().lower()
    return or_(
        cast(GameTable.id, String) == game.strip(),
        func.lower(GameTable.name) == needle,
        func.lower(GameTable.short_name) == needle,
    )


class PostgresPlayerRepository(PostgresRepository, IPlayerRepository):
    """
    Loads player aggregates in four round trips regardless of page size:
    players, schools, main games and game profiles joined with games.
    """

    async def get_by_id(self, player_id: str) -> Optional[PlayerProfile]:
        players = await self.get_by_ids([player_id])
        return players[0] if players else None

    async def get_by_ids(self, player_ids: Sequence[str]) -> List[PlayerProfile]:
        ids = list(dict.fromkeys(player_ids))
        if not ids:
            return []
        async with self.session("load players") as session:
            # Opaque ids that are not UUIDs can never match
            stmt = select(PlayerTable).where(cast(PlayerTable.id, String).in_(ids))
            rows = list((await session.execute(stmt)).scalars().all())
            return await self._assemble(session, rows)

    async def list_candidates(self, game_id: Optional[str] = None) -> List[PlayerProfile]:
        async with self.session("list candidate players") as session:
            stmt = select(PlayerTable)
            if game_id:
                stmt = stmt.where(
                    exists(
                        select(PlayerGameProfileTable.id)
                        .join(GameTable, GameTable.id == PlayerGameProfileTable.game_id)
                        .where(PlayerGameProfileTable.player_id == PlayerTable.id)
                        .where(_game_matches(game_id))
                    )
                )
            stmt = stmt.order_by(PlayerTable.id)
            rows = list((await session.execute(stmt)).scalars().all())
            return await self._assemble(session, rows)

    async def list_player_ids(self) -> List[str]:
        async with self.session("list player ids") as session:
            result = await session.execute(select(PlayerTable.id).order_by(PlayerTable.id))
            return [str(player_id) for player_id in result.scalars().all()]

    async def count(self) -> int:
        async with self.session("count players") as session:
            result = await session.execute(select(func.count()).select_from(PlayerTable))
            return int(result.scalar_one())

    async def _assemble(self, session: AsyncSession, rows: List[PlayerTable]) -> List[PlayerProfile]:
        if not rows:
            return []
        player_ids = [row.id for row in rows]

        school_ids = {row.school_id for row in rows if row.school_id}
        schools: Dict[str, SchoolTable] = {}
        if school_ids:
            result = await session.execute(select(SchoolTable).where(SchoolTable.id.in_(school_ids)))
            schools = {str(s.id): s for s in result.scalars().all()}

        main_game_ids = {row.main_game_id for row in rows if row.main_game_id}
        games: Dict[str, GameTable] = {}
        if main_game_ids:
            result = await session.execute(select(GameTable).where(GameTable.id.in_(main_game_ids)))
            games = {str(g.id): g for g in result.scalars().all()}

        result = await session.execute(
            select(PlayerGameProfileTable, GameTable)
            .join(GameTable, GameTable.id == PlayerGameProfileTable.game_id)
            .where(PlayerGameProfileTable.player_id.in_(player_ids))
        )
        profiles: Dict[str, List[Tuple[PlayerGameProfileTable, GameTable]]] = defaultdict(list)
        for profile, game in result.all():
            profiles[str(profile.player_id)].append((profile, game))

        return PlayerMapper.assemble(rows, schools, games, profiles)
