"""Dependency containers for application services."""

from talent_search.application.dependencies.talent_search_dependencies import TalentSearchDependencies

__all__ = ["TalentSearchDependencies"]
