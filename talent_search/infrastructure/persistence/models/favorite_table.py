"""Recruiter favorites, unique per (recruiter, player)."""

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Column, Index, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from talent_search.infrastructure.persistence.models.base import (
    create_timestamp_column,
    create_uuid_column,
)


class RecruiterFavoriteTable(SQLModel, table=True):
    __tablename__ = "recruiter_favorites"

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        sa_column=create_uuid_column(primary_key=True),
    )
    recruiter_id: str = Field(sa_column=create_uuid_column(), description="Coach who saved the player")
    player_id: str = Field(sa_column=create_uuid_column(index=True), description="Saved player")
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    tags: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default=text("'[]'::jsonb")),
    )
    created_at: Optional[datetime] = Field(default=None, sa_column=create_timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=create_timestamp_column(onupdate=True))

    __table_args__ = (
        UniqueConstraint("recruiter_id", "player_id", name="uq_recruiter_favorites_pair"),
        Index("ix_recruiter_favorites_recruiter_created", "recruiter_id", "created_at"),
    )


__all__ = ["RecruiterFavoriteTable"]
