"""Recruiter favorites."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class FavoriteRecord:
    """A (recruiter, player) favorite. Unique on the pair."""

    recruiter_id: str
    player_id: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    notes: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.recruiter_id or not self.player_id:
            raise ValueError("Favorite requires recruiter_id and player_id")
        # Tags are unique and keep first-seen order
        seen = []
        for tag in self.tags:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        self.tags = seen


@dataclass(frozen=True)
class FavoriteToggleResult:
    player_id: str
    favorited: bool
