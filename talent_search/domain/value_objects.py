"""Domain value objects used across aggregates."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class SchoolType(str, Enum):
    """Type of school a player attends or a recruiter represents."""

    HIGH_SCHOOL = "HIGH_SCHOOL"
    COLLEGE = "COLLEGE"
    UNIVERSITY = "UNIVERSITY"

    @property
    def label(self) -> str:
        return {
            SchoolType.HIGH_SCHOOL: "High School",
            SchoolType.COLLEGE: "College",
            SchoolType.UNIVERSITY: "University",
        }[self]


class PrincipalRole(str, Enum):
    """Roles supplied by the identity provider."""

    RECRUITER = "recruiter"
    ADMIN = "admin"
    PLAYER = "player"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as seen by the engine: an opaque id and a role."""

    id: str
    role: PrincipalRole

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise ValueError("Principal id cannot be empty")

    @property
    def is_admin(self) -> bool:
        return self.role == PrincipalRole.ADMIN


@dataclass(frozen=True)
class RecruiterContext:
    """
    The part of a recruiter's identity that personalizes analysis text.

    Two recruiters with the same school, school type and games share cached
    analyses; changing any of them yields a different cache key.
    """

    school_name: Optional[str] = None
    school_type: Optional[SchoolType] = None
    games: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        school_name: Optional[str],
        school_type: Optional[SchoolType],
        games: Iterable[str],
    ) -> RecruiterContext:
        """Build a context with normalized, order-independent games."""
        normalized = tuple(sorted({g.strip() for g in games if g and g.strip()}))
        name = school_name.strip() if school_name and school_name.strip() else None
        return cls(school_name=name, school_type=school_type, games=normalized)

    def cache_key(self) -> str:
        """Stable hash of the context used in analysis cache keys."""
        payload = json.dumps(
            {
                "school_name": self.school_name,
                "school_type": self.school_type.value if self.school_type else None,
                "games": list(self.games),
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:32]
