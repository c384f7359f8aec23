"""Recruiter-personalized player analysis."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List


@dataclass(frozen=True)
class PlayerAnalysis:
    """Narrative written for one recruiter context about one player."""

    overview: str
    pros: List[str] = field(default_factory=list)
    cons: List[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.utcnow)
    is_cached: bool = False

    def as_cached(self) -> PlayerAnalysis:
        return replace(self, is_cached=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overview": self.overview,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "generated_at": self.generated_at.isoformat(),
            "is_cached": self.is_cached,
        }


@dataclass(frozen=True)
class StoredAnalysis:
    """Persisted analysis with the keys needed to judge staleness."""

    player_id: str
    context_hash: str
    source_hash: str
    analysis: PlayerAnalysis
