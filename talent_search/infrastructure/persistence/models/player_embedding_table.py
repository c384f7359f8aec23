"""
Player embedding vectors for semantic talent search.

One row per player, written with a single upsert so a player's vector, text
and source hash always change together.
"""

from datetime import datetime
from typing import List, Optional

from pgvector.sqlalchemy import Vector
from sqlalchemy import Column, Index, String, Text
from sqlmodel import Field, SQLModel

from talent_search.core.config import get_settings
from talent_search.infrastructure.persistence.models.base import (
    create_timestamp_column,
    create_uuid_column,
)

EMBEDDING_DIMENSION = get_settings().EMBEDDING_DIMENSION


class PlayerEmbeddingTable(SQLModel, table=True):
    """Vector index row keyed by player id."""

    __tablename__ = "player_embeddings"

    player_id: str = Field(
        sa_column=create_uuid_column(primary_key=True),
        description="Player the vector describes",
    )
    embedding: List[float] = Field(
        sa_column=Column(Vector(EMBEDDING_DIMENSION), nullable=False),
        description="Embedding of the player text",
    )
    embedding_text: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Exact text that was embedded",
    )
    source_hash: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="SHA-256 of the player snapshot; staleness marker",
    )
    embedding_model: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Embedding model that produced the vector",
    )
    created_at: Optional[datetime] = Field(default=None, sa_column=create_timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=create_timestamp_column(onupdate=True))

    __table_args__ = (
        Index(
            "ix_player_embeddings_embedding_hnsw",
            "embedding",
            postgresql_using="hnsw",
            postgresql_ops={"embedding": "vector_cosine_ops"},
        ),
    )


__all__ = ["PlayerEmbeddingTable", "EMBEDDING_DIMENSION"]
