"""create talent search tables

Revision ID: 4c1f7d2a9b10
Revises:
Create Date: 2025-11-03 10:15:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4c1f7d2a9b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMBEDDING_DIMENSION = 1536


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "player_embeddings",
        sa.Column("player_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("embedding", Vector(EMBEDDING_DIMENSION), nullable=False),
        sa.Column("embedding_text", sa.Text(), nullable=False),
        sa.Column("source_hash", sa.String(length=64), nullable=False),
        sa.Column("embedding_model", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("player_id"),
    )
    op.create_index(
        "ix_player_embeddings_embedding_hnsw",
        "player_embeddings",
        ["embedding"],
        unique=False,
        postgresql_using="hnsw",
        postgresql_ops={"embedding": "vector_cosine_ops"},
    )

    op.create_table(
        "recruiter_favorites",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("recruiter_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("player_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "tags",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("recruiter_id", "player_id", name="uq_recruiter_favorites_pair"),
    )
    with op.batch_alter_table("recruiter_favorites", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_recruiter_favorites_player_id"), ["player_id"], unique=False)
        batch_op.create_index("ix_recruiter_favorites_recruiter_created", ["recruiter_id", "created_at"], unique=False)

    op.create_table(
        "player_analyses",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("player_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("context_hash", sa.String(length=64), nullable=False),
        sa.Column("source_hash", sa.String(length=64), nullable=False),
        sa.Column("overview", sa.Text(), nullable=False),
        sa.Column(
            "pros",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "cons",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("player_id", "context_hash", name="uq_player_analyses_player_context"),
    )
    with op.batch_alter_table("player_analyses", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_player_analyses_player_id"), ["player_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("player_analyses", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_player_analyses_player_id"))
    op.drop_table("player_analyses")

    with op.batch_alter_table("recruiter_favorites", schema=None) as batch_op:
        batch_op.drop_index("ix_recruiter_favorites_recruiter_created")
        batch_op.drop_index(batch_op.f("ix_recruiter_favorites_player_id"))
    op.drop_table("recruiter_favorites")

    op.drop_index("ix_player_embeddings_embedding_hnsw", table_name="player_embeddings")
    op.drop_table("player_embeddings")
