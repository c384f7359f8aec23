"""
API Package

Versioned API routes for the talent search engine.

Note: Routers are imported lazily to avoid circular import issues with application services.
"""

from fastapi import APIRouter


def create_api_router() -> APIRouter:
    """Create the main API router with all v1 routes under /api/v1."""
    from talent_search.api.v1.talent_search import router as talent_search_router

    api_router = APIRouter()
    api_router.include_router(
        talent_search_router,
        prefix="/api/v1",
    )
    return api_router


__all__ = ["create_api_router"]
