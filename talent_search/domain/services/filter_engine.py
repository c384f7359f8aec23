"""Structured predicate filtering over candidate player pools."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from talent_search.domain.entities.player import GameProfile, PlayerProfile
from talent_search.domain.entities.search import TalentSearchFilters
from talent_search.domain.services.rank_normalizer import RankNormalizer

Predicate = Callable[[PlayerProfile], bool]


def _folded(values: Iterable[str]) -> set:
    return {value.strip().casefold() for value in values if value and value.strip()}


class FilterEngine:
    """
    Applies every specified filter dimension as a conjunction.

    Absent dimensions impose no constraint and input order is preserved.
    """

    def __init__(self, rank_normalizer: Optional[RankNormalizer] = None):
        self.rank_normalizer = rank_normalizer or RankNormalizer()

    def apply(self, players: Iterable[PlayerProfile], filters: TalentSearchFilters) -> List[PlayerProfile]:
        predicates = self.build_predicates(filters)
        return [player for player in players if all(check(player) for check in predicates)]

    def build_predicates(self, filters: TalentSearchFilters) -> List[Predicate]:
        predicates: List[Predicate] = []

        if filters.game_id:
            game_id = filters.game_id
            predicates.append(lambda p: p.has_game(game_id))

        if filters.class_years:
            class_years = {year.strip() for year in filters.class_years}
            predicates.append(
                lambda p: p.academics.class_year is not None
                and p.academics.class_year.strip() in class_years
            )

        if filters.school_types:
            school_types = set(filters.school_types)
            predicates.append(lambda p: p.school.type is not None and p.school.type in school_types)

        if filters.locations:
            locations = _folded(filters.locations)
            predicates.append(lambda p: bool(p.location_tokens() & locations))

        if filters.has_gpa_bounds:
            predicates.append(lambda p: self._gpa_in_bounds(p, filters.min_gpa, filters.max_gpa))

        if filters.roles:
            roles = _folded(filters.roles)
            predicates.append(lambda p: self._has_role(p, roles, filters.game_id))

        # Tiers are ambiguous without a game
        if filters.rank_tiers and filters.game_id:
            tiers = _folded(filters.rank_tiers)
            predicates.append(lambda p: self._in_rank_tiers(p.profile_for_game(filters.game_id), tiers))

        return predicates

    @staticmethod
    def _gpa_in_bounds(player: PlayerProfile, min_gpa: Optional[float], max_gpa: Optional[float]) -> bool:
        gpa = player.academics.gpa
        if gpa is None:
            return False
        if min_gpa is not None and gpa < min_gpa:
            return False
        if max_gpa is not None and gpa > max_gpa:
            return False
        return True

    @staticmethod
    def _has_role(player: PlayerProfile, roles: set, game_id: Optional[str]) -> bool:
        if game_id:
            profile = player.profile_for_game(game_id)
            profiles = [profile] if profile else []
        else:
            profiles = player.game_profiles
        return any(p.role and p.role.strip().casefold() in roles for p in profiles)

    def _in_rank_tiers(self, profile: Optional[GameProfile], tiers: set) -> bool:
        if profile is None or not profile.rank or not profile.rank.strip():
            return False
        order = self.rank_normalizer.rank_order_for_profile(profile)
        # Off-vocabulary ranks never match a tier
        if order and profile.rank.strip().casefold() not in {r.casefold() for r in order}:
            return False
        return self.rank_normalizer.tier(profile.rank).casefold() in tiers


__all__ = ["FilterEngine"]
