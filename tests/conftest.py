"""Shared pytest fixtures: player factories, in-memory repositories and fakes."""

from __future__ import annotations

from typing import Optional, Sequence

import pytest

from talent_search.application.dependencies import TalentSearchDependencies
from talent_search.application.favorite_service import FavoriteLedgerService
from talent_search.application.search.talent_search_service import TalentSearchService
from talent_search.domain.entities import (
    AcademicInfo,
    GameProfile,
    MainGameSummary,
    PlayerProfile,
    RecruiterProfile,
    SchoolSummary,
)
from talent_search.domain.value_objects import SchoolType
from talent_search.infrastructure.search.vector_search import VectorSearchService
from tests.mocks.mock_repositories import (
    MockEmbeddingRepository,
    MockFavoriteRepository,
    MockPlayerRepository,
    MockRecruiterRepository,
)
from tests.mocks.mock_services import MockEmbeddingProvider, MockEntitlementService

VALORANT = "valorant"
ROCKET_LEAGUE = "rocket-league"


def game_profile(
    game_id: str = VALORANT,
    rank: Optional[str] = None,
    role: Optional[str] = None,
    combine_score: Optional[float] = None,
    league_score: Optional[float] = None,
    agents: Sequence[str] = (),
) -> GameProfile:
    names = {
        VALORANT: ("VALORANT", "VAL"),
        ROCKET_LEAGUE: ("Rocket League", "RL"),
        "overwatch-2": ("Overwatch 2", "OW2"),
    }
    name, short_name = names.get(game_id, (game_id, None))
    return GameProfile(
        game_id=game_id,
        game_name=name,
        game_short_name=short_name,
        username=f"{game_id}-player",
        rank=rank,
        role=role,
        agents=tuple(agents),
        combine_score=combine_score,
        league_score=league_score,
    )


def make_player(
    player_id: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    *,
    username: Optional[str] = None,
    location: Optional[str] = None,
    bio: Optional[str] = None,
    school_type: Optional[SchoolType] = SchoolType.HIGH_SCHOOL,
    school_state: Optional[str] = None,
    class_year: Optional[str] = "2026",
    gpa: Optional[float] = None,
    games: Sequence[GameProfile] = (),
) -> PlayerProfile:
    main_game = None
    if games:
        main_game = MainGameSummary(id=games[0].game_id, name=games[0].game_name)
    return PlayerProfile(
        id=player_id,
        first_name=first_name,
        last_name=last_name,
        username=username,
        location=location,
        bio=bio,
        school=SchoolSummary(id=f"school-{player_id}", name="Central High", type=school_type, state=school_state),
        academics=AcademicInfo(class_year=class_year, gpa=gpa),
        main_game=main_game,
        game_profiles=list(games),
    )


@pytest.fixture
def player_repository() -> MockPlayerRepository:
    return MockPlayerRepository()


@pytest.fixture
def recruiter_repository() -> MockRecruiterRepository:
    return MockRecruiterRepository(
        [
            RecruiterProfile(
                id="coach-1",
                school_name="State University",
                school_type=SchoolType.UNIVERSITY,
                game_ids=[VALORANT],
                game_names=["VALORANT"],
            )
        ]
    )


@pytest.fixture
def favorite_repository() -> MockFavoriteRepository:
    return MockFavoriteRepository()


@pytest.fixture
def embedding_repository() -> MockEmbeddingRepository:
    return MockEmbeddingRepository()


@pytest.fixture
def embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def entitlement_service() -> MockEntitlementService:
    return MockEntitlementService(entitled={"coach-1"})


@pytest.fixture
def favorite_service(favorite_repository) -> FavoriteLedgerService:
    return FavoriteLedgerService(repository=favorite_repository)


@pytest.fixture
def vector_search(embedding_repository) -> VectorSearchService:
    return VectorSearchService(repository=embedding_repository, over_fetch_factor=3, timeout_seconds=1.0)


@pytest.fixture
def search_dependencies(
    player_repository,
    recruiter_repository,
    favorite_service,
    embedding_provider,
    vector_search,
    entitlement_service,
) -> TalentSearchDependencies:
    return TalentSearchDependencies(
        player_repository=player_repository,
        recruiter_repository=recruiter_repository,
        favorite_service=favorite_service,
        embedding_provider=embedding_provider,
        vector_search=vector_search,
        entitlement_service=entitlement_service,
    )


@pytest.fixture
def search_service(search_dependencies) -> TalentSearchService:
    return TalentSearchService(search_dependencies)
