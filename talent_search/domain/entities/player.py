"""Pure domain representation of recruitable player profiles."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Set, Tuple

from talent_search.domain.value_objects import SchoolType


@dataclass(frozen=True)
class GameProfile:
    """A player's profile in one game. A player has at most one per game."""

    game_id: str
    game_name: str
    game_short_name: Optional[str] = None
    username: Optional[str] = None
    rank: Optional[str] = None
    rating: Optional[float] = None
    role: Optional[str] = None
    agents: Tuple[str, ...] = ()
    play_style: Optional[str] = None
    combine_score: Optional[float] = None
    league_score: Optional[float] = None

    def matches_game(self, game: str) -> bool:
        """Match on game id, or on name / short name ignoring case."""
        if not game:
            return False
        if self.game_id == game:
            return True
        needle = game.casefold()
        names = [self.game_name, self.game_short_name]
        return any(name and name.casefold() == needle for name in names)


@dataclass(frozen=True)
class SchoolSummary:
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[SchoolType] = None
    state: Optional[str] = None


@dataclass(frozen=True)
class AcademicInfo:
    class_year: Optional[str] = None
    gpa: Optional[float] = None
    graduation_date: Optional[date] = None
    intended_major: Optional[str] = None


@dataclass(frozen=True)
class MainGameSummary:
    id: str
    name: str
    short_name: Optional[str] = None
    icon_url: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class PlayerEmbeddingData:
    """
    Denormalized snapshot of a player used to produce an embedding.

    The source hash covers every field; any change to a tracked field marks the
    stored vector as stale.
    """

    player_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    school: Optional[str] = None
    school_type: Optional[SchoolType] = None
    class_year: Optional[str] = None
    gpa: Optional[float] = None
    intended_major: Optional[str] = None
    main_game: Optional[str] = None
    game_profiles: Tuple[Dict[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "username": self.username,
            "location": self.location,
            "bio": self.bio,
            "school": self.school,
            "school_type": self.school_type.value if self.school_type else None,
            "class_year": self.class_year,
            "gpa": self.gpa,
            "intended_major": self.intended_major,
            "main_game": self.main_game,
            "game_profiles": [dict(p) for p in self.game_profiles],
        }

    def source_hash(self) -> str:
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass
class PlayerProfile:
    """Read model of a player as owned by the relational store."""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    school: SchoolSummary = field(default_factory=SchoolSummary)
    academics: AcademicInfo = field(default_factory=AcademicInfo)
    main_game: Optional[MainGameSummary] = None
    game_profiles: List[GameProfile] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.username or self.id

    def profile_for_game(self, game: str) -> Optional[GameProfile]:
        for profile in self.game_profiles:
            if profile.matches_game(game):
                return profile
        return None

    def has_game(self, game: str) -> bool:
        return self.profile_for_game(game) is not None

    def plays_any(self, games: Set[str]) -> bool:
        return any(self.has_game(game) for game in games)

    def location_tokens(self) -> Set[str]:
        """Case-folded whole location, each comma part and the school state."""
        tokens: Set[str] = set()
        if self.location and self.location.strip():
            tokens.add(self.location.strip().casefold())
            tokens.update(part.strip().casefold() for part in self.location.split(",") if part.strip())
        if self.school.state and self.school.state.strip():
            tokens.add(self.school.state.strip().casefold())
        return tokens

    def to_embedding_data(self) -> PlayerEmbeddingData:
        profiles = tuple(
            {
                "game": p.game_name,
                "username": p.username,
                "rank": p.rank,
                "role": p.role,
                "agents": list(p.agents),
                "play_style": p.play_style,
            }
            for p in sorted(self.game_profiles, key=lambda p: p.game_id)
        )
        return PlayerEmbeddingData(
            player_id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            location=self.location,
            bio=self.bio,
            school=self.school.name,
            school_type=self.school.type,
            class_year=self.academics.class_year,
            gpa=self.academics.gpa,
            intended_major=self.academics.intended_major,
            main_game=self.main_game.name if self.main_game else None,
            game_profiles=profiles,
        )
