"""Final ordering of filtered candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from talent_search.domain.entities.player import PlayerProfile


@dataclass(frozen=True)
class RankingWeights:
    """Weights of the semantic relevance score."""

    similarity_weight: float = 1.0
    game_match_boost: float = 0.15


@dataclass(frozen=True)
class RankedCandidate:
    player: PlayerProfile
    similarity: float
    score: float
    game_match: bool


def _name_key(player: PlayerProfile) -> Tuple[str, str, str]:
    name = player.display_name
    return (name.casefold(), name, player.id)


def _desc_nulls_last(value: Optional[float]) -> Tuple[int, float]:
    return (1, 0.0) if value is None else (0, -value)


class RelevanceRanker:
    """
    Orders candidates deterministically.

    Semantic ranking scores ``similarity_weight * similarity + game_match_boost``
    (boost only when the player plays a game of interest) and breaks ties by
    similarity, case-folded display name, raw display name and player id.
    Filter-only ranking has no similarity and orders by the filtered game's
    combine and league scores, or by game match and name without a game.
    """

    def __init__(self, weights: Optional[RankingWeights] = None):
        self.weights = weights or RankingWeights()

    def rank(
        self,
        candidates: Iterable[Tuple[PlayerProfile, float]],
        *,
        game_id: Optional[str] = None,
        games_of_interest: Optional[Set[str]] = None,
        semantic: bool = True,
    ) -> List[RankedCandidate]:
        interest = {game_id} if game_id else set(games_of_interest or ())
        ranked = []
        for player, similarity in candidates:
            game_match = player.plays_any(interest) if interest else False
            if semantic:
                similarity = min(max(similarity, 0.0), 1.0)
                score = self.weights.similarity_weight * similarity
                if game_match:
                    score += self.weights.game_match_boost
            else:
                similarity = 0.0
                score = 0.0
            ranked.append(RankedCandidate(player, similarity, score, game_match))

        if semantic:
            ranked.sort(key=lambda c: (-c.score, -c.similarity) + _name_key(c.player))
        elif game_id:
            ranked.sort(key=lambda c: self._game_score_key(c.player, game_id) + _name_key(c.player))
        else:
            ranked.sort(key=lambda c: (not c.game_match,) + _name_key(c.player))
        return ranked

    @staticmethod
    def _game_score_key(player: PlayerProfile, game_id: str) -> tuple:
        profile = player.profile_for_game(game_id)
        if profile is None:
            return _desc_nulls_last(None) + _desc_nulls_last(None)
        return _desc_nulls_last(profile.combine_score) + _desc_nulls_last(profile.league_score)


__all__ = ["RankingWeights", "RankedCandidate", "RelevanceRanker"]
