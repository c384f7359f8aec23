"""Vector retrieval."""

from talent_search.infrastructure.search.vector_search import VectorMatch, VectorSearchService

__all__ = ["VectorMatch", "VectorSearchService"]
