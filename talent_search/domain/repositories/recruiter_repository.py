"""Domain repository contract for recruiter profiles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from talent_search.domain.entities.recruiter import RecruiterProfile


class IRecruiterRepository(ABC):

    @abstractmethod
    async def get_profile(self, recruiter_id: str) -> Optional[RecruiterProfile]:
        """Load the recruiter's school and team games, or None when unknown."""
        raise NotImplementedError
