"""Tests for PlayerAnalysisService."""

import asyncio

import pytest

from talent_search.application.analysis_service import PlayerAnalysisService, analysis_cache_key
from talent_search.domain.entities import RecruiterProfile
from talent_search.domain.exceptions import (
    AnalysisUnavailableError,
    PlayerNotFoundError,
    ProviderUnavailableError,
)
from talent_search.domain.value_objects import RecruiterContext, SchoolType
from talent_search.infrastructure.ai.cache_manager import AnalysisCacheManager
from tests.conftest import VALORANT, game_profile, make_player
from tests.mocks.mock_repositories import MockAnalysisRepository
from tests.mocks.mock_services import MockAnalysisGenerator


@pytest.fixture
def generator() -> MockAnalysisGenerator:
    return MockAnalysisGenerator(delay=0.01)


@pytest.fixture
def analysis_repository() -> MockAnalysisRepository:
    return MockAnalysisRepository()


@pytest.fixture
def analysis_service(player_repository, recruiter_repository, generator, analysis_repository):
    player_repository.add_player(
        make_player("p1", "Ava", "Stone", bio="Entry fragger", games=[game_profile(VALORANT, rank="Diamond 1")])
    )
    recruiter_repository.profiles["coach-2"] = RecruiterProfile(
        id="coach-2",
        school_name="Tech College",
        school_type=SchoolType.COLLEGE,
        game_ids=[VALORANT],
        game_names=["VALORANT"],
    )
    recruiter_repository.profiles["coach-3"] = RecruiterProfile(
        id="coach-3",
        school_name="State University",
        school_type=SchoolType.UNIVERSITY,
        game_ids=[VALORANT],
        game_names=["VALORANT"],
    )
    return PlayerAnalysisService(
        player_repository=player_repository,
        recruiter_repository=recruiter_repository,
        generator=generator,
        cache=AnalysisCacheManager(repository=analysis_repository, ttl_seconds=3600),
    )


class TestPlayerAnalysisService:
    """Test caching, personalization and error mapping."""

    @pytest.mark.asyncio
    async def test_generates_then_serves_cached(self, analysis_service, generator):
        """Test a repeat view is served from cache."""
        first = await analysis_service.get_for_recruiter("coach-1", "p1")
        second = await analysis_service.get_for_recruiter("coach-1", "p1")

        assert generator.call_count == 1
        assert first.is_cached is False
        assert second.is_cached is True
        assert second.overview == first.overview

    @pytest.mark.asyncio
    async def test_recruiters_with_same_context_share_analysis(self, analysis_service, generator):
        """Test two coaches of the same school and games share one analysis."""
        await analysis_service.get_for_recruiter("coach-1", "p1")
        shared = await analysis_service.get_for_recruiter("coach-3", "p1")

        assert generator.call_count == 1
        assert shared.is_cached is True

    @pytest.mark.asyncio
    async def test_different_context_generates_separately(self, analysis_service, generator):
        """Test analyses are personalized per recruiter context."""
        state = await analysis_service.get_for_recruiter("coach-1", "p1")
        tech = await analysis_service.get_for_recruiter("coach-2", "p1")

        assert generator.call_count == 2
        assert "State University" in state.overview
        assert "Tech College" in tech.overview
        assert generator.contexts[1].school_type == SchoolType.COLLEGE

    @pytest.mark.asyncio
    async def test_concurrent_views_generate_once(self, analysis_service, generator):
        """Test concurrent first views of one card share a generation."""
        results = await asyncio.gather(
            *(analysis_service.get_for_recruiter("coach-1", "p1") for _ in range(5))
        )

        assert generator.call_count == 1
        assert len({r.overview for r in results}) == 1

    @pytest.mark.asyncio
    async def test_profile_change_regenerates(self, analysis_service, player_repository, generator):
        """Test editing the player invalidates cached analyses."""
        await analysis_service.get_for_recruiter("coach-1", "p1")
        player_repository.players["p1"].bio = "Now an IGL"

        fresh = await analysis_service.get_for_recruiter("coach-1", "p1")

        assert generator.call_count == 2
        assert fresh.is_cached is False

    @pytest.mark.asyncio
    async def test_unknown_player(self, analysis_service):
        with pytest.raises(PlayerNotFoundError):
            await analysis_service.get_for_recruiter("coach-1", "missing")

    @pytest.mark.asyncio
    async def test_unknown_recruiter_gets_generic_context(self, analysis_service, generator):
        """Test principals without a recruiter profile get a generic analysis."""
        analysis = await analysis_service.get_for_recruiter("admin-1", "p1")

        assert "a coach" in analysis.overview
        assert generator.contexts[0] == RecruiterContext()

    @pytest.mark.asyncio
    async def test_generator_failure_is_not_cached(self, analysis_service, generator):
        """Test a failed generation is retried on the next request."""
        generator.fail_with = ProviderUnavailableError("model down")

        with pytest.raises(AnalysisUnavailableError):
            await analysis_service.get_for_recruiter("coach-1", "p1")

        generator.fail_with = None
        analysis = await analysis_service.get_for_recruiter("coach-1", "p1")
        assert analysis.is_cached is False
        assert generator.call_count == 2

    @pytest.mark.asyncio
    async def test_player_store_failure(self, analysis_service, player_repository):
        player_repository.should_fail = True

        with pytest.raises(AnalysisUnavailableError):
            await analysis_service.get_for_recruiter("coach-1", "p1")

    @pytest.mark.asyncio
    async def test_recruiter_store_failure(self, analysis_service, recruiter_repository):
        recruiter_repository.should_fail = True

        with pytest.raises(AnalysisUnavailableError):
            await analysis_service.get_for_recruiter("coach-1", "p1")

    @pytest.mark.asyncio
    async def test_invalidate_player(self, analysis_service, generator, analysis_repository):
        await analysis_service.get_for_recruiter("coach-1", "p1")

        assert await analysis_service.invalidate_player("p1") == 1
        await analysis_service.get_for_recruiter("coach-1", "p1")
        assert generator.call_count == 2

    def test_cache_key_includes_context(self):
        context = RecruiterContext.create("State University", SchoolType.UNIVERSITY, ["VALORANT"])
        assert analysis_cache_key("p1", context) == f"analysis:p1:{context.cache_key()}"
