"""Recruiter (coach) profile as seen by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from talent_search.domain.entities.player import SchoolType
from talent_search.domain.value_objects import RecruiterContext


@dataclass
class RecruiterProfile:
    """A coach's school and the games their teams compete in."""

    id: str
    school_name: Optional[str] = None
    school_type: Optional[SchoolType] = None
    game_ids: List[str] = field(default_factory=list)
    game_names: List[str] = field(default_factory=list)

    def games_of_interest(self) -> Set[str]:
        return set(self.game_ids)

    def analysis_context(self) -> RecruiterContext:
        return RecruiterContext.create(self.school_name, self.school_type, self.game_names)
