"""
Persisted player analyses.

Keyed by (player_id, context_hash) where the context hash identifies the
recruiter audience the narrative was written for.
"""

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from talent_search.infrastructure.persistence.models.base import create_uuid_column


class PlayerAnalysisTable(SQLModel, table=True):
    __tablename__ = "player_analyses"

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        sa_column=create_uuid_column(primary_key=True),
    )
    player_id: str = Field(sa_column=create_uuid_column(index=True))
    context_hash: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Hash of school name, school type and games of interest",
    )
    source_hash: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Player snapshot hash the analysis was generated from",
    )
    overview: str = Field(sa_column=Column(Text, nullable=False))
    pros: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default=text("'[]'::jsonb")),
    )
    cons: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default=text("'[]'::jsonb")),
    )
    generated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))

    __table_args__ = (
        UniqueConstraint("player_id", "context_hash", name="uq_player_analyses_player_context"),
    )


__all__ = ["PlayerAnalysisTable"]
