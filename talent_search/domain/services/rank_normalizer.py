"""Game-specific competitive rank vocabularies and comparisons."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from talent_search.domain.entities.player import GameProfile

# Ordered lowest to highest
RANK_ORDERS: Dict[str, List[str]] = {
    "VALORANT": [
        "Iron 1", "Iron 2", "Iron 3",
        "Bronze 1", "Bronze 2", "Bronze 3",
        "Silver 1", "Silver 2", "Silver 3",
        "Gold 1", "Gold 2", "Gold 3",
        "Platinum 1", "Platinum 2", "Platinum 3",
        "Diamond 1", "Diamond 2", "Diamond 3",
        "Ascendant 1", "Ascendant 2", "Ascendant 3",
        "Immortal 1", "Immortal 2", "Immortal 3",
        "Radiant",
    ],
    "Overwatch 2": [
        "Bronze 5", "Bronze 4", "Bronze 3", "Bronze 2", "Bronze 1",
        "Silver 5", "Silver 4", "Silver 3", "Silver 2", "Silver 1",
        "Gold 5", "Gold 4", "Gold 3", "Gold 2", "Gold 1",
        "Platinum 5", "Platinum 4", "Platinum 3", "Platinum 2", "Platinum 1",
        "Diamond 5", "Diamond 4", "Diamond 3", "Diamond 2", "Diamond 1",
        "Master 5", "Master 4", "Master 3", "Master 2", "Master 1",
        "Grandmaster 5", "Grandmaster 4", "Grandmaster 3", "Grandmaster 2", "Grandmaster 1",
        "Champion",
        "Top 500",
    ],
    "Rocket League": [
        "Bronze I", "Bronze II", "Bronze III",
        "Silver I", "Silver II", "Silver III",
        "Gold I", "Gold II", "Gold III",
        "Platinum I", "Platinum II", "Platinum III",
        "Diamond I", "Diamond II", "Diamond III",
        "Champion I", "Champion II", "Champion III",
        "Grand Champion I", "Grand Champion II", "Grand Champion III",
        "Supersonic Legend",
    ],
    # No meaningful ranks
    "Super Smash Bros. Ultimate": [],
}

GAME_ALIASES: Dict[str, str] = {
    "valorant": "VALORANT",
    "val": "VALORANT",
    "overwatch2": "Overwatch 2",
    "overwatch": "Overwatch 2",
    "ow2": "Overwatch 2",
    "ow": "Overwatch 2",
    "rocketleague": "Rocket League",
    "rl": "Rocket League",
    "supersmashbrosultimate": "Super Smash Bros. Ultimate",
    "smashultimate": "Super Smash Bros. Ultimate",
    "smash": "Super Smash Bros. Ultimate",
    "ssbu": "Super Smash Bros. Ultimate",
}

_TIER_SUFFIX = re.compile(r"(?:\s+(?:\d+|[IVX]+))+$")
_LEVEL_SUFFIX = re.compile(r"\s+(\d+|[IVX]+)$")
_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def _game_key(game: str) -> str:
    return _NON_ALNUM.sub("", game.casefold())


class RankNormalizer:
    """
    Per-game rank ordering.

    Ranks missing from a game's vocabulary sort after every known rank and are
    reported invalid. Games without a vocabulary compare ranks as plain strings
    and accept any rank as valid.
    """

    def __init__(self, rank_orders: Optional[Dict[str, List[str]]] = None):
        self._orders = dict(rank_orders if rank_orders is not None else RANK_ORDERS)
        self._lookup: Dict[str, str] = {_game_key(name): name for name in self._orders}
        for alias, name in GAME_ALIASES.items():
            if name in self._orders:
                self._lookup.setdefault(alias, name)
        self._indexes: Dict[str, Dict[str, int]] = {
            name: {rank.casefold(): i for i, rank in enumerate(order)}
            for name, order in self._orders.items()
        }

    def resolve_game(self, game: Optional[str]) -> Optional[str]:
        """Canonical vocabulary name for a game name, slug or alias."""
        if not game:
            return None
        return self._lookup.get(_game_key(game))

    def rank_order(self, game: Optional[str]) -> List[str]:
        name = self.resolve_game(game)
        return list(self._orders[name]) if name else []

    def rank_order_for_profile(self, profile: GameProfile) -> List[str]:
        """Vocabulary for a game profile, trying its name, short name and id."""
        for candidate in (profile.game_name, profile.game_short_name, profile.game_id):
            name = self.resolve_game(candidate)
            if name:
                return list(self._orders[name])
        return []

    def supports_ranks(self, game: Optional[str]) -> bool:
        return bool(self.rank_order(game))

    def _index(self, rank: str, game: Optional[str]) -> int:
        name = self.resolve_game(game)
        if not name:
            return 0
        index = self._indexes[name]
        return index.get(rank.strip().casefold(), len(self._orders[name]))

    def compare(self, rank_a: str, rank_b: str, game: Optional[str]) -> int:
        """Return -1, 0 or 1 as rank_a is lower than, equal to or higher than rank_b."""
        if not self.supports_ranks(game):
            return (rank_a > rank_b) - (rank_a < rank_b)
        a = self._index(rank_a, game)
        b = self._index(rank_b, game)
        return (a > b) - (a < b)

    def is_valid(self, rank: Optional[str], game: Optional[str]) -> bool:
        if not self.supports_ranks(game):
            return True
        if not rank:
            return False
        return self._index(rank, game) < len(self.rank_order(game))

    def next_higher(self, rank: str, game: Optional[str]) -> Optional[str]:
        order = self.rank_order(game)
        if not order or not self.is_valid(rank, game):
            return None
        position = self._index(rank, game)
        return order[position + 1] if position + 1 < len(order) else None

    def next_lower(self, rank: str, game: Optional[str]) -> Optional[str]:
        order = self.rank_order(game)
        if not order or not self.is_valid(rank, game):
            return None
        position = self._index(rank, game)
        return order[position - 1] if position > 0 else None

    @staticmethod
    def tier(rank: str) -> str:
        """Base rank name: ``Diamond 2`` -> ``Diamond``, ``Grand Champion III`` -> ``Grand Champion``."""
        return _TIER_SUFFIX.sub("", rank.strip()).strip()

    @staticmethod
    def level(rank: str) -> str:
        match = _LEVEL_SUFFIX.search(rank.strip())
        return match.group(1) if match else ""

    @classmethod
    def format_display(cls, rank: Optional[str]) -> str:
        if not rank or not rank.strip():
            return "Unranked"
        tier = cls.tier(rank)
        level = cls.level(rank)
        return f"{tier} {level}" if level and tier else rank.strip()

    def available_ranks(self, game: Optional[str], present: Iterable[str]) -> List[str]:
        """Ranks present in the data, in vocabulary order (alphabetical without one)."""
        present_set = set(present)
        order = self.rank_order(game)
        if not order:
            return sorted(present_set)
        return [rank for rank in order if rank in present_set]


__all__ = ["RANK_ORDERS", "GAME_ALIASES", "RankNormalizer"]
