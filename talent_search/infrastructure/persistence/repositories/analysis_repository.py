"""PostgreSQL implementation of IPlayerAnalysisRepository."""

from typing import Optional

from sqlalchemy import String, cast, delete, select
from sqlalchemy.dialects.postgresql import insert

from talent_search.domain.entities.analysis import StoredAnalysis
from talent_search.domain.repositories.analysis_repository import IPlayerAnalysisRepository
from talent_search.infrastructure.persistence.mappers.record_mapper import AnalysisMapper
from talent_search.infrastructure.persistence.models.base import to_db_timestamp
from talent_search.infrastructure.persistence.models.player_analysis_table import PlayerAnalysisTable
from talent_search.infrastructure.persistence.repositories.base import PostgresRepository


class PostgresPlayerAnalysisRepository(PostgresRepository, IPlayerAnalysisRepository):

    async def get(self, player_id: str, context_hash: str) -> Optional[StoredAnalysis]:
        async with self.session("load player analysis") as session:
            result = await session.execute(
                select(PlayerAnalysisTable)
                .where(cast(PlayerAnalysisTable.player_id, String) == player_id)
                .where(PlayerAnalysisTable.context_hash == context_hash)
            )
            row = result.scalars().first()
            return AnalysisMapper.to_domain(row) if row else None

    async def save(self, stored: StoredAnalysis) -> None:
        analysis = stored.analysis
        async with self.session("save player analysis") as session:
            stmt = insert(PlayerAnalysisTable).values(
                player_id=stored.player_id,
                context_hash=stored.context_hash,
                source_hash=stored.source_hash,
                overview=analysis.overview,
                pros=list(analysis.pros),
                cons=list(analysis.cons),
                generated_at=to_db_timestamp(analysis.generated_at),
            )
            stmt = stmt.on_conflict_do_update(
                constraint="uq_player_analyses_player_context",
                set_={
                    "source_hash": stmt.excluded.source_hash,
                    "overview": stmt.excluded.overview,
                    "pros": stmt.excluded.pros,
                    "cons": stmt.excluded.cons,
                    "generated_at": stmt.excluded.generated_at,
                },
            )
            await session.execute(stmt)

    async def delete_for_player(self, player_id: str) -> int:
        async with self.session("delete player analyses") as session:
            result = await session.execute(
                delete(PlayerAnalysisTable).where(cast(PlayerAnalysisTable.player_id, String) == player_id)
            )
            return result.rowcount or 0
