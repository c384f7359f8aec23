"""pgvector implementation of IPlayerEmbeddingRepository."""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import String, cast, delete, func, literal, select
from sqlalchemy.dialects.postgresql import insert

from talent_search.domain.entities.embedding import PlayerEmbeddingRecord
from talent_search.domain.repositories.embedding_repository import IPlayerEmbeddingRepository
from talent_search.infrastructure.persistence.mappers.record_mapper import EmbeddingMapper
from talent_search.infrastructure.persistence.models.base import to_db_timestamp
from talent_search.infrastructure.persistence.models.player_embedding_table import PlayerEmbeddingTable
from talent_search.infrastructure.persistence.repositories.base import PostgresRepository


class PostgresPlayerEmbeddingRepository(PostgresRepository, IPlayerEmbeddingRepository):

    async def save(self, record: PlayerEmbeddingRecord) -> None:
        async with self.session("save player embedding") as session:
            stmt = insert(PlayerEmbeddingTable).values(
                player_id=record.player_id,
                embedding=list(record.vector),
                embedding_text=record.embedding_text,
                source_hash=record.source_hash,
                embedding_model=record.embedding_model,
                updated_at=to_db_timestamp(record.updated_at),
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[PlayerEmbeddingTable.player_id],
                set_={
                    "embedding": stmt.excluded.embedding,
                    "embedding_text": stmt.excluded.embedding_text,
                    "source_hash": stmt.excluded.source_hash,
                    "embedding_model": stmt.excluded.embedding_model,
                    "updated_at": func.now(),
                },
            )
            await session.execute(stmt)

    async def get(self, player_id: str) -> Optional[PlayerEmbeddingRecord]:
        async with self.session("load player embedding") as session:
            result = await session.execute(
                select(PlayerEmbeddingTable).where(cast(PlayerEmbeddingTable.player_id, String) == player_id)
            )
            row = result.scalars().first()
            return EmbeddingMapper.to_domain(row) if row else None

    async def delete(self, player_id: str) -> bool:
        async with self.session("delete player embedding") as session:
            result = await session.execute(
                delete(PlayerEmbeddingTable).where(cast(PlayerEmbeddingTable.player_id, String) == player_id)
            )
            return (result.rowcount or 0) > 0

    async def get_source_hashes(self, player_ids: Sequence[str]) -> Dict[str, str]:
        ids = list(dict.fromkeys(player_ids))
        if not ids:
            return {}
        async with self.session("load embedding source hashes") as session:
            result = await session.execute(
                select(PlayerEmbeddingTable.player_id, PlayerEmbeddingTable.source_hash)
                .where(cast(PlayerEmbeddingTable.player_id, String).in_(ids))
            )
            return {str(player_id): source_hash for player_id, source_hash in result.all()}

    async def count(self) -> int:
        async with self.session("count player embeddings") as session:
            result = await session.execute(select(func.count()).select_from(PlayerEmbeddingTable))
            return int(result.scalar_one())

    async def similarity_search(
        self,
        vector: Sequence[float],
        limit: int,
        min_similarity: float,
    ) -> List[Tuple[str, float]]:
        distance = PlayerEmbeddingTable.embedding.cosine_distance(list(vector))
        similarity = (literal(1.0) - distance).label("similarity")
        async with self.session("run similarity search") as session:
            result = await session.execute(
                select(PlayerEmbeddingTable.player_id, similarity)
                .where(literal(1.0) - distance >= min_similarity)
                .order_by(distance, PlayerEmbeddingTable.player_id)
                .limit(limit)
            )
            return [(str(player_id), float(score)) for player_id, score in result.all()]
