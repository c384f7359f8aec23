"""Search request and response entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from talent_search.domain.entities.player import (
    AcademicInfo,
    GameProfile,
    MainGameSummary,
    SchoolSummary,
    SchoolType,
)
from talent_search.domain.exceptions import InvalidInputError

MIN_LIMIT = 1
MAX_LIMIT = 100
DEFAULT_LIMIT = 50
DEFAULT_MIN_SIMILARITY = 0.3
MAX_GPA = 4.0
MAX_QUERY_LENGTH = 500


@dataclass(frozen=True)
class TalentSearchFilters:
    """
    Recruiter-supplied query configuration.

    Every field is optional; absent fields impose no constraint. Set-valued
    fields are stored as frozensets so identical requests compare equal.
    """

    query: Optional[str] = None
    game_id: Optional[str] = None
    class_years: FrozenSet[str] = frozenset()
    school_types: FrozenSet[SchoolType] = frozenset()
    locations: FrozenSet[str] = frozenset()
    min_gpa: Optional[float] = None
    max_gpa: Optional[float] = None
    roles: FrozenSet[str] = frozenset()
    rank_tiers: FrozenSet[str] = frozenset()
    limit: int = DEFAULT_LIMIT
    min_similarity: float = DEFAULT_MIN_SIMILARITY

    def __post_init__(self):
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise InvalidInputError("limit must be an integer")
        if not MIN_LIMIT <= self.limit <= MAX_LIMIT:
            raise InvalidInputError(f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}")
        if not 0.0 <= self.min_similarity <= 1.0:
            raise InvalidInputError("min_similarity must be between 0 and 1")
        for name in ("min_gpa", "max_gpa"):
            value = getattr(self, name)
            if value is not None and not 0.0 <= value <= MAX_GPA:
                raise InvalidInputError(f"{name} must be between 0.0 and {MAX_GPA}")
        if self.min_gpa is not None and self.max_gpa is not None and self.min_gpa > self.max_gpa:
            raise InvalidInputError("min_gpa cannot exceed max_gpa")
        if self.query is not None and len(self.query) > MAX_QUERY_LENGTH:
            raise InvalidInputError(f"query cannot exceed {MAX_QUERY_LENGTH} characters")
        for school_type in self.school_types:
            if not isinstance(school_type, SchoolType):
                raise InvalidInputError(f"Unknown school type: {school_type}")

    @property
    def effective_query(self) -> Optional[str]:
        if self.query and self.query.strip():
            return self.query.strip()
        return None

    @property
    def has_gpa_bounds(self) -> bool:
        return self.min_gpa is not None or self.max_gpa is not None


@dataclass(frozen=True)
class TalentSearchResult:
    """One ranked row, computed per request and never persisted."""

    player_id: str
    first_name: Optional[str]
    last_name: Optional[str]
    username: Optional[str]
    display_name: str
    image_url: Optional[str]
    location: Optional[str]
    bio: Optional[str]
    school: SchoolSummary
    academics: AcademicInfo
    main_game: Optional[MainGameSummary]
    game_profiles: List[GameProfile]
    similarity_score: float
    is_favorited: bool


@dataclass
class TalentSearchResponse:
    results: List[TalentSearchResult] = field(default_factory=list)
    total_count: int = 0
    query: Optional[str] = None
    semantic_applied: bool = False
    degraded: bool = False
    degraded_reason: Optional[str] = None
