"""Mappers for the engine-owned tables."""

from talent_search.domain.entities.analysis import PlayerAnalysis, StoredAnalysis
from talent_search.domain.entities.embedding import PlayerEmbeddingRecord
from talent_search.domain.entities.favorite import FavoriteRecord
from talent_search.infrastructure.persistence.models.base import from_db_timestamp
from talent_search.infrastructure.persistence.models.favorite_table import RecruiterFavoriteTable
from talent_search.infrastructure.persistence.models.player_analysis_table import PlayerAnalysisTable
from talent_search.infrastructure.persistence.models.player_embedding_table import PlayerEmbeddingTable


class FavoriteMapper:

    @staticmethod
    def to_domain(row: RecruiterFavoriteTable) -> FavoriteRecord:
        return FavoriteRecord(
            recruiter_id=str(row.recruiter_id),
            player_id=str(row.player_id),
            created_at=from_db_timestamp(row.created_at),
            updated_at=from_db_timestamp(row.updated_at),
            notes=row.notes,
            tags=list(row.tags or []),
        )


class AnalysisMapper:

    @staticmethod
    def to_domain(row: PlayerAnalysisTable) -> StoredAnalysis:
        return StoredAnalysis(
            player_id=str(row.player_id),
            context_hash=row.context_hash,
            source_hash=row.source_hash,
            analysis=PlayerAnalysis(
                overview=row.overview,
                pros=list(row.pros or []),
                cons=list(row.cons or []),
                generated_at=from_db_timestamp(row.generated_at),
                is_cached=True,
            ),
        )


class EmbeddingMapper:

    @staticmethod
    def to_domain(row: PlayerEmbeddingTable) -> PlayerEmbeddingRecord:
        return PlayerEmbeddingRecord(
            player_id=str(row.player_id),
            vector=[float(v) for v in row.embedding],
            embedding_text=row.embedding_text,
            source_hash=row.source_hash,
            embedding_model=row.embedding_model,
            updated_at=from_db_timestamp(row.updated_at),
        )
