"""Recruiter-personalized player analysis with caching."""

from __future__ import annotations

from typing import Optional

import structlog

from talent_search.domain.entities.analysis import PlayerAnalysis
from talent_search.domain.exceptions import (
    AnalysisUnavailableError,
    DomainException,
    PersistenceError,
    PlayerNotFoundError,
)
from talent_search.domain.interfaces import IAnalysisCache, IAnalysisGenerator
from talent_search.domain.repositories.player_repository import IPlayerRepository
from talent_search.domain.repositories.recruiter_repository import IRecruiterRepository
from talent_search.domain.value_objects import RecruiterContext

logger = structlog.get_logger(__name__)


def analysis_cache_key(player_id: str, context: RecruiterContext) -> str:
    return f"analysis:{player_id}:{context.cache_key()}"


class PlayerAnalysisService:
    """
    Returns a cached analysis when one exists for the player and recruiter
    context, otherwise generates one.

    Cache entries are tied to the player's current source hash, so any change
    to the player profile yields a fresh analysis on the next request.
    """

    def __init__(
        self,
        player_repository: IPlayerRepository,
        recruiter_repository: IRecruiterRepository,
        generator: IAnalysisGenerator,
        cache: IAnalysisCache,
    ):
        self.player_repository = player_repository
        self.recruiter_repository = recruiter_repository
        self.generator = generator
        self.cache = cache

    async def get_or_generate(self, player_id: str, recruiter_context: RecruiterContext) -> PlayerAnalysis:
        try:
            player = await self.player_repository.get_by_id(player_id)
        except PersistenceError as e:
            raise AnalysisUnavailableError(f"Player could not be loaded: {e}") from e
        if player is None:
            raise PlayerNotFoundError(player_id)

        snapshot = player.to_embedding_data()
        key = analysis_cache_key(player_id, recruiter_context)

        async def generate() -> PlayerAnalysis:
            logger.info("Generating player analysis", player_id=player_id, key=key)
            try:
                return await self.generator.generate(snapshot, recruiter_context)
            except AnalysisUnavailableError:
                raise
            except DomainException as e:
                raise AnalysisUnavailableError(f"Analysis generation failed: {e}") from e

        analysis, cached = await self.cache.get_or_generate(
            key=key,
            player_id=player_id,
            context_hash=recruiter_context.cache_key(),
            source_hash=snapshot.source_hash(),
            generate=generate,
        )
        logger.debug("Player analysis served", player_id=player_id, cached=cached)
        return analysis

    async def get_for_recruiter(self, recruiter_id: str, player_id: str) -> PlayerAnalysis:
        """Resolve the recruiter's context and return the analysis written for it."""
        context = await self.resolve_context(recruiter_id)
        return await self.get_or_generate(player_id, context)

    async def resolve_context(self, recruiter_id: str) -> RecruiterContext:
        try:
            profile = await self.recruiter_repository.get_profile(recruiter_id)
        except PersistenceError as e:
            raise AnalysisUnavailableError(f"Recruiter context could not be loaded: {e}") from e
        if profile is None:
            # Unknown recruiters (e.g. admins) get the generic audience
            return RecruiterContext()
        return profile.analysis_context()

    async def invalidate_player(self, player_id: str) -> int:
        return await self.cache.invalidate_player(player_id)


__all__ = ["PlayerAnalysisService", "analysis_cache_key"]
