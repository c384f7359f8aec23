"""Tests for domain entities and value objects."""

import pytest

from talent_search.domain.entities.embedding import (
    EmbeddingBatchResult,
    EmbeddingRefreshOptions,
    RefreshMode,
)
from talent_search.domain.entities.favorite import FavoriteRecord
from talent_search.domain.entities.recruiter import RecruiterProfile
from talent_search.domain.entities.search import MAX_QUERY_LENGTH, TalentSearchFilters
from talent_search.domain.exceptions import InvalidInputError
from talent_search.domain.value_objects import Principal, PrincipalRole, RecruiterContext, SchoolType
from tests.conftest import ROCKET_LEAGUE, VALORANT, game_profile, make_player


class TestTalentSearchFilters:
    """Test filter validation."""

    def test_defaults(self):
        """Test default limit and similarity threshold."""
        filters = TalentSearchFilters()
        assert filters.limit == 50
        assert filters.min_similarity == 0.3
        assert filters.effective_query is None

    @pytest.mark.parametrize("limit", [0, 101, -5])
    def test_limit_out_of_range(self, limit):
        """Test limits outside 1..100 are rejected."""
        with pytest.raises(InvalidInputError):
            TalentSearchFilters(limit=limit)

    def test_limit_must_be_integer(self):
        """Test booleans are not accepted as limits."""
        with pytest.raises(InvalidInputError):
            TalentSearchFilters(limit=True)

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_min_similarity_out_of_range(self, value):
        """Test similarity thresholds outside [0, 1] are rejected."""
        with pytest.raises(InvalidInputError):
            TalentSearchFilters(min_similarity=value)

    def test_inverted_gpa_bounds(self):
        """Test min_gpa above max_gpa is rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            TalentSearchFilters(min_gpa=3.5, max_gpa=3.0)
        assert "min_gpa" in str(exc_info.value)

    def test_gpa_above_scale(self):
        """Test GPA bounds above 4.0 are rejected."""
        with pytest.raises(InvalidInputError):
            TalentSearchFilters(max_gpa=4.5)

    def test_query_too_long(self):
        """Test overlong queries are rejected."""
        with pytest.raises(InvalidInputError):
            TalentSearchFilters(query="x" * (MAX_QUERY_LENGTH + 1))

    def test_unknown_school_type(self):
        """Test school types must be SchoolType members."""
        with pytest.raises(InvalidInputError):
            TalentSearchFilters(school_types=frozenset({"ACADEMY"}))

    def test_blank_query_is_not_effective(self):
        """Test whitespace-only queries count as absent."""
        assert TalentSearchFilters(query="   ").effective_query is None
        assert TalentSearchFilters(query="  aggressive duelist ").effective_query == "aggressive duelist"


class TestRecruiterContext:
    """Test analysis context normalization and cache keys."""

    def test_cache_key_ignores_game_order(self):
        """Test games are order-independent in the cache key."""
        a = RecruiterContext.create("State U", SchoolType.UNIVERSITY, ["VALORANT", "Rocket League"])
        b = RecruiterContext.create("State U", SchoolType.UNIVERSITY, ["Rocket League", "VALORANT", "VALORANT"])
        assert a == b
        assert a.cache_key() == b.cache_key()

    def test_cache_key_changes_with_school(self):
        """Test a different school yields a different key."""
        a = RecruiterContext.create("State U", SchoolType.UNIVERSITY, ["VALORANT"])
        b = RecruiterContext.create("Tech College", SchoolType.COLLEGE, ["VALORANT"])
        assert a.cache_key() != b.cache_key()

    def test_blank_school_name_is_absent(self):
        """Test blank names normalize to None."""
        context = RecruiterContext.create("   ", None, ["", " VALORANT "])
        assert context.school_name is None
        assert context.games == ("VALORANT",)

    def test_recruiter_profile_context(self):
        """Test recruiter profiles build their analysis context from game names."""
        profile = RecruiterProfile(
            id="coach",
            school_name="State U",
            school_type=SchoolType.UNIVERSITY,
            game_ids=[VALORANT],
            game_names=["VALORANT"],
        )
        assert profile.games_of_interest() == {VALORANT}
        assert profile.analysis_context().games == ("VALORANT",)


class TestPlayerProfile:
    """Test player helpers used by filters and embeddings."""

    def test_display_name_fallbacks(self):
        """Test display name falls back to username, then id."""
        assert make_player("p1", "Ava", "Stone").display_name == "Ava Stone"
        assert make_player("p2", username="ace").display_name == "ace"
        assert make_player("p3").display_name == "p3"

    def test_source_hash_tracks_changes(self):
        """Test the source hash changes when a tracked field changes."""
        player = make_player("p1", "Ava", bio="Entry fragger", games=[game_profile(VALORANT, rank="Gold 1")])
        same = make_player("p1", "Ava", bio="Entry fragger", games=[game_profile(VALORANT, rank="Gold 1")])
        changed = make_player("p1", "Ava", bio="Entry fragger", games=[game_profile(VALORANT, rank="Gold 2")])
        assert player.to_embedding_data().source_hash() == same.to_embedding_data().source_hash()
        assert player.to_embedding_data().source_hash() != changed.to_embedding_data().source_hash()

    def test_source_hash_ignores_profile_order(self):
        """Test game profile order does not change the hash."""
        first = make_player("p1", games=[game_profile(VALORANT), game_profile(ROCKET_LEAGUE)])
        second = make_player("p1", games=[game_profile(ROCKET_LEAGUE), game_profile(VALORANT)])
        # main game follows the first profile, so align it
        second.main_game = first.main_game
        assert first.to_embedding_data().source_hash() == second.to_embedding_data().source_hash()


class TestFavoriteRecord:
    def test_requires_ids(self):
        """Test both ids are required."""
        with pytest.raises(ValueError):
            FavoriteRecord(recruiter_id="", player_id="p1")

    def test_tags_are_unique_and_trimmed(self):
        """Test tags keep first-seen order without duplicates or blanks."""
        record = FavoriteRecord(recruiter_id="c", player_id="p", tags=["igl", " igl ", "", "duelist"])
        assert record.tags == ["igl", "duelist"]


class TestEmbeddingEntities:
    def test_refresh_options_defaults(self):
        """Test default refresh options."""
        options = EmbeddingRefreshOptions()
        assert options.mode == RefreshMode.ONLY_MISSING
        assert options.batch_size == 10
        assert options.batch_delay_ms == 1000

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"batch_size": 0},
            {"batch_size": 51},
            {"batch_delay_ms": 99},
            {"batch_delay_ms": 10001},
        ],
    )
    def test_refresh_options_bounds(self, kwargs):
        """Test batch size and delay bounds."""
        with pytest.raises(InvalidInputError):
            EmbeddingRefreshOptions(**kwargs)

    def test_batch_result_counters(self):
        """Test skips are not counted as processed."""
        result = EmbeddingBatchResult()
        result.record_success()
        result.record_failure("p2")
        result.record_skip()
        assert (result.processed, result.succeeded, result.failed, result.skipped) == (2, 1, 1, 1)
        assert result.failed_ids == ["p2"]


class TestPrincipal:
    def test_blank_id_rejected(self):
        """Test principals need an id."""
        with pytest.raises(ValueError):
            Principal(id=" ", role=PrincipalRole.RECRUITER)

    def test_is_admin(self):
        assert Principal(id="a", role=PrincipalRole.ADMIN).is_admin is True
        assert Principal(id="r", role=PrincipalRole.RECRUITER).is_admin is False
