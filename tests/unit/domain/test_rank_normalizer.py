"""
Tests for RankNormalizer.

Covers per-game ordering, alias resolution, validity, neighbouring ranks
and display helpers.
"""

import pytest
from hypothesis import given, strategies as st

from talent_search.domain.entities.player import GameProfile
from talent_search.domain.services.rank_normalizer import RANK_ORDERS, RankNormalizer

VALORANT_RANKS = RANK_ORDERS["VALORANT"]


class TestRankNormalizer:
    """Test rank ordering across game vocabularies."""

    def setup_method(self):
        """Set up test fixtures."""
        self.normalizer = RankNormalizer()

    # Ordering

    def test_compare_within_valorant(self):
        """Test higher ranks compare greater."""
        assert self.normalizer.compare("Diamond 1", "Gold 3", "VALORANT") == 1
        assert self.normalizer.compare("Gold 3", "Diamond 1", "VALORANT") == -1
        assert self.normalizer.compare("Radiant", "Radiant", "VALORANT") == 0

    def test_compare_is_case_insensitive(self):
        """Test rank spelling case does not change order."""
        assert self.normalizer.compare("diamond 2", "DIAMOND 1", "valorant") == 1

    def test_unknown_rank_sorts_after_known(self):
        """Test off-vocabulary ranks sort after every known rank."""
        assert self.normalizer.compare("Mythic", "Radiant", "VALORANT") == 1
        assert self.normalizer.compare("Iron 1", "Mythic", "VALORANT") == -1

    def test_game_without_vocabulary_compares_strings(self):
        """Test games without ranks fall back to string comparison."""
        assert self.normalizer.compare("a", "b", "Super Smash Bros. Ultimate") == -1
        assert self.normalizer.compare("b", "a", "Unknown Game") == 1

    def test_overwatch_order_counts_down_within_tier(self):
        """Test Overwatch divisions run from 5 up to 1."""
        assert self.normalizer.compare("Gold 1", "Gold 5", "Overwatch 2") == 1
        assert self.normalizer.compare("Top 500", "Champion", "Overwatch 2") == 1

    @given(
        st.sampled_from(VALORANT_RANKS),
        st.sampled_from(VALORANT_RANKS),
    )
    def test_compare_is_antisymmetric(self, rank_a, rank_b):
        """Test compare(a, b) is the negation of compare(b, a)."""
        normalizer = RankNormalizer()
        assert normalizer.compare(rank_a, rank_b, "VALORANT") == -normalizer.compare(rank_b, rank_a, "VALORANT")

    @given(st.sampled_from(VALORANT_RANKS), st.sampled_from(VALORANT_RANKS))
    def test_compare_follows_vocabulary_position(self, rank_a, rank_b):
        """Test compare agrees with the vocabulary index."""
        normalizer = RankNormalizer()
        expected = (VALORANT_RANKS.index(rank_a) > VALORANT_RANKS.index(rank_b)) - (
            VALORANT_RANKS.index(rank_a) < VALORANT_RANKS.index(rank_b)
        )
        assert normalizer.compare(rank_a, rank_b, "VALORANT") == expected

    # Game resolution

    @pytest.mark.parametrize(
        "game,expected",
        [
            ("VALORANT", "VALORANT"),
            ("val", "VALORANT"),
            ("OW2", "Overwatch 2"),
            ("overwatch-2", "Overwatch 2"),
            ("rocket-league", "Rocket League"),
            ("RL", "Rocket League"),
            ("SSBU", "Super Smash Bros. Ultimate"),
            ("Chess", None),
            (None, None),
        ],
    )
    def test_resolve_game(self, game, expected):
        """Test names, slugs and aliases resolve to one vocabulary."""
        assert self.normalizer.resolve_game(game) == expected

    def test_rank_order_for_profile_uses_short_name(self):
        """Test a profile resolves through its short name when the id is opaque."""
        profile = GameProfile(game_id="g-123", game_name="Valorant (PC)", game_short_name="VAL")
        assert self.normalizer.rank_order_for_profile(profile) == VALORANT_RANKS

    def test_rank_order_returns_copy(self):
        """Test callers cannot mutate the vocabulary."""
        order = self.normalizer.rank_order("VALORANT")
        order.clear()
        assert self.normalizer.rank_order("VALORANT") == VALORANT_RANKS

    # Validity

    def test_is_valid(self):
        """Test vocabulary membership."""
        assert self.normalizer.is_valid("Ascendant 2", "VALORANT") is True
        assert self.normalizer.is_valid("Champion", "VALORANT") is False
        assert self.normalizer.is_valid(None, "VALORANT") is False
        assert self.normalizer.is_valid("anything", "Super Smash Bros. Ultimate") is True

    # Neighbours

    def test_next_higher_and_lower(self):
        """Test stepping through the vocabulary."""
        assert self.normalizer.next_higher("Immortal 3", "VALORANT") == "Radiant"
        assert self.normalizer.next_higher("Radiant", "VALORANT") is None
        assert self.normalizer.next_lower("Iron 1", "VALORANT") is None
        assert self.normalizer.next_lower("Champion", "Overwatch 2") == "Grandmaster 1"
        assert self.normalizer.next_higher("Grand Champion III", "Rocket League") == "Supersonic Legend"

    def test_neighbours_of_unknown_rank(self):
        """Test unknown ranks have no neighbours."""
        assert self.normalizer.next_higher("Mythic", "VALORANT") is None
        assert self.normalizer.next_lower("Mythic", "VALORANT") is None
        assert self.normalizer.next_higher("Pro", "Super Smash Bros. Ultimate") is None

    # Display helpers

    @pytest.mark.parametrize(
        "rank,tier,level",
        [
            ("Diamond 2", "Diamond", "2"),
            ("Grand Champion III", "Grand Champion", "III"),
            ("Radiant", "Radiant", ""),
            ("Supersonic Legend", "Supersonic Legend", ""),
        ],
    )
    def test_tier_and_level(self, rank, tier, level):
        """Test splitting a rank into tier and level."""
        assert RankNormalizer.tier(rank) == tier
        assert RankNormalizer.level(rank) == level

    def test_format_display(self):
        """Test display formatting."""
        assert RankNormalizer.format_display(None) == "Unranked"
        assert RankNormalizer.format_display("   ") == "Unranked"
        assert RankNormalizer.format_display("Diamond 2") == "Diamond 2"
        assert RankNormalizer.format_display(" Radiant ") == "Radiant"

    def test_available_ranks_in_vocabulary_order(self):
        """Test present ranks come back lowest first."""
        present = ["Radiant", "Gold 1", "Iron 2", "Gold 1"]
        assert self.normalizer.available_ranks("VALORANT", present) == ["Iron 2", "Gold 1", "Radiant"]

    def test_available_ranks_without_vocabulary(self):
        """Test alphabetical order for games without ranks."""
        assert self.normalizer.available_ranks("Chess", ["b", "a"]) == ["a", "b"]
