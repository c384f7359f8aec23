"""Talent search orchestration."""

from talent_search.application.search.talent_search_service import TalentSearchService

__all__ = ["TalentSearchService"]
