"""Shared column helpers for persistence models."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlalchemy.dialects.postgresql import UUID as PostgreSQLUUID
from sqlalchemy.sql import func


def create_uuid_column(primary_key: bool = False, nullable: bool = False, index: bool = False) -> Column:
    """UUID column surfaced to Python as str; ids stay opaque to the domain."""
    return Column(PostgreSQLUUID(as_uuid=False), primary_key=primary_key, nullable=nullable, index=index)


def create_timestamp_column(onupdate: bool = False) -> Column:
    return Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now() if onupdate else None,
    )


def to_db_timestamp(value: datetime) -> datetime:
    """Domain timestamps are naive UTC; the store keeps timestamptz."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def from_db_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
