"""Repository provider utilities."""

from __future__ import annotations

import asyncio
from typing import Optional

from talent_search.database.sqlmodel_engine import get_sqlmodel_db_manager
from talent_search.domain.interfaces import IEntitlementService
from talent_search.domain.repositories import (
    IFavoriteRepository,
    IPlayerAnalysisRepository,
    IPlayerEmbeddingRepository,
    IPlayerRepository,
    IRecruiterRepository,
)
from talent_search.infrastructure.persistence.repositories import (
    PostgresEntitlementService,
    PostgresFavoriteRepository,
    PostgresPlayerAnalysisRepository,
    PostgresPlayerEmbeddingRepository,
    PostgresPlayerRepository,
    PostgresRecruiterRepository,
)

_player_repository: Optional[IPlayerRepository] = None
_recruiter_repository: Optional[IRecruiterRepository] = None
_favorite_repository: Optional[IFavoriteRepository] = None
_embedding_repository: Optional[IPlayerEmbeddingRepository] = None
_analysis_repository: Optional[IPlayerAnalysisRepository] = None
_entitlement_service: Optional[IEntitlementService] = None

_player_lock = asyncio.Lock()
_recruiter_lock = asyncio.Lock()
_favorite_lock = asyncio.Lock()
_embedding_lock = asyncio.Lock()
_analysis_lock = asyncio.Lock()
_entitlement_lock = asyncio.Lock()


async def get_player_repository() -> IPlayerRepository:
    """Return player repository implementation."""
    global _player_repository

    if _player_repository is not None:
        return _player_repository

    async with _player_lock:
        if _player_repository is None:
            _player_repository = PostgresPlayerRepository(get_sqlmodel_db_manager())
        return _player_repository


async def get_recruiter_repository() -> IRecruiterRepository:
    """Return recruiter repository implementation."""
    global _recruiter_repository

    if _recruiter_repository is not None:
        return _recruiter_repository

    async with _recruiter_lock:
        if _recruiter_repository is None:
            _recruiter_repository = PostgresRecruiterRepository(get_sqlmodel_db_manager())
        return _recruiter_repository


async def get_favorite_repository() -> IFavoriteRepository:
    """Return favorite repository implementation."""
    global _favorite_repository

    if _favorite_repository is not None:
        return _favorite_repository

    async with _favorite_lock:
        if _favorite_repository is None:
            _favorite_repository = PostgresFavoriteRepository(get_sqlmodel_db_manager())
        return _favorite_repository


async def get_embedding_repository() -> IPlayerEmbeddingRepository:
    """Return player embedding repository implementation."""
    global _embedding_repository

    if _embedding_repository is not None:
        return _embedding_repository

    async with _embedding_lock:
        if _embedding_repository is None:
            _embedding_repository = PostgresPlayerEmbeddingRepository(get_sqlmodel_db_manager())
        return _embedding_repository


async def get_analysis_repository() -> IPlayerAnalysisRepository:
    """Return player analysis repository implementation."""
    global _analysis_repository

    if _analysis_repository is not None:
        return _analysis_repository

    async with _analysis_lock:
        if _analysis_repository is None:
            _analysis_repository = PostgresPlayerAnalysisRepository(get_sqlmodel_db_manager())
        return _analysis_repository


async def get_entitlement_service() -> IEntitlementService:
    """Return entitlement service backed by the feature_entitlements table."""
    global _entitlement_service

    if _entitlement_service is not None:
        return _entitlement_service

    async with _entitlement_lock:
        if _entitlement_service is None:
            _entitlement_service = PostgresEntitlementService(get_sqlmodel_db_manager())
        return _entitlement_service


async def reset_repositories() -> None:
    """Reset cached repository instances (for testing)."""
    global _player_repository, _recruiter_repository, _favorite_repository
    global _embedding_repository, _analysis_repository, _entitlement_service

    _player_repository = None
    _recruiter_repository = None
    _favorite_repository = None
    _embedding_repository = None
    _analysis_repository = None
    _entitlement_service = None


__all__ = [
    "get_player_repository",
    "get_recruiter_repository",
    "get_favorite_repository",
    "get_embedding_repository",
    "get_analysis_repository",
    "get_entitlement_service",
    "reset_repositories",
]
