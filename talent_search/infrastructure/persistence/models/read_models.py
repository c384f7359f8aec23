"""
Read models for tables owned by the wider recruiting platform.

The engine only reads these tables; they are not created by its migrations.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import ARRAY, Column, Date, DateTime, Float, Numeric, String, Text
from sqlmodel import Field, SQLModel

from talent_search.infrastructure.persistence.models.base import create_uuid_column


class SchoolTable(SQLModel, table=True):
    __tablename__ = "schools"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    name: str = Field(sa_column=Column(String, nullable=False))
    type: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    state: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))


class GameTable(SQLModel, table=True):
    __tablename__ = "games"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    name: str = Field(sa_column=Column(String, nullable=False))
    short_name: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    icon: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    color: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))


class PlayerTable(SQLModel, table=True):
    __tablename__ = "players"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    first_name: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    last_name: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    username: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    image_url: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    location: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    bio: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    school: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    school_id: Optional[str] = Field(default=None, sa_column=create_uuid_column(nullable=True))
    class_year: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    gpa: Optional[float] = Field(default=None, sa_column=Column(Numeric(3, 2, asdecimal=False), nullable=True))
    graduation_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))
    intended_major: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    main_game_id: Optional[str] = Field(default=None, sa_column=create_uuid_column(nullable=True))


class PlayerGameProfileTable(SQLModel, table=True):
    __tablename__ = "player_game_profiles"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    player_id: str = Field(sa_column=create_uuid_column())
    game_id: str = Field(sa_column=create_uuid_column())
    username: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    rank: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    rating: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    role: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    agents: List[str] = Field(default_factory=list, sa_column=Column(ARRAY(String), nullable=True))
    play_style: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    combine_score: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    league_score: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))


class CoachTable(SQLModel, table=True):
    __tablename__ = "coaches"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    school: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    school_id: Optional[str] = Field(default=None, sa_column=create_uuid_column(nullable=True))


class TeamTable(SQLModel, table=True):
    __tablename__ = "teams"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    coach_id: str = Field(sa_column=create_uuid_column())
    game_id: str = Field(sa_column=create_uuid_column())


class FeatureEntitlementTable(SQLModel, table=True):
    """Feature grants written by the billing system."""

    __tablename__ = "feature_entitlements"

    id: str = Field(sa_column=create_uuid_column(primary_key=True))
    principal_id: str = Field(sa_column=create_uuid_column())
    feature_key: str = Field(sa_column=Column(String(100), nullable=False))
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))


__all__ = [
    "CoachTable",
    "FeatureEntitlementTable",
    "GameTable",
    "PlayerGameProfileTable",
    "PlayerTable",
    "SchoolTable",
    "TeamTable",
]
