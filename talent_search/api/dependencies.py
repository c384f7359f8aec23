"""
API-specific dependencies for principals and application services.

The identity gateway authenticates callers and forwards an opaque principal id
and role in request headers; this module turns them into a Principal and
enforces role requirements per route.
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, Header, HTTPException, status

from talent_search.application.analysis_service import PlayerAnalysisService
from talent_search.application.embedding_refresh_service import EmbeddingRefreshService
from talent_search.application.favorite_service import FavoriteLedgerService
from talent_search.application.search.talent_search_service import TalentSearchService
from talent_search.domain.exceptions import (
    AnalysisUnavailableError,
    AuthorizationError,
    CollaboratorUnavailableError,
    ConfigurationError,
    DomainException,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ProcessingError,
    SearchFailedError,
    UnauthorizedError,
    ValidationError,
)
from talent_search.domain.value_objects import Principal, PrincipalRole
from talent_search.infrastructure.providers.search_provider import (
    get_analysis_service,
    get_embedding_refresh_service,
    get_favorite_service,
    get_talent_search_service,
)

logger = structlog.get_logger(__name__)

PRINCIPAL_ID_HEADER = "X-Principal-Id"
PRINCIPAL_ROLE_HEADER = "X-Principal-Role"


# Principal Dependencies
async def get_current_principal(
    principal_id: Annotated[Optional[str], Header(alias=PRINCIPAL_ID_HEADER)] = None,
    principal_role: Annotated[Optional[str], Header(alias=PRINCIPAL_ROLE_HEADER)] = None,
) -> Principal:
    """Build the caller's Principal from gateway headers."""
    if not principal_id or not principal_id.strip() or not principal_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    try:
        role = PrincipalRole(principal_role.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unknown role: {principal_role}",
        )
    return Principal(id=principal_id.strip(), role=role)


CurrentPrincipalDep = Annotated[Principal, Depends(get_current_principal)]


def _require_roles(principal: Principal, *roles: PrincipalRole) -> Principal:
    if principal.role not in roles:
        logger.info("Principal role rejected", principal_id=principal.id, role=principal.role.value)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions for this operation",
        )
    return principal


async def require_recruiter(principal: CurrentPrincipalDep) -> Principal:
    """Recruiters only."""
    return _require_roles(principal, PrincipalRole.RECRUITER)


async def require_search_access(principal: CurrentPrincipalDep) -> Principal:
    """Recruiters and admins."""
    return _require_roles(principal, PrincipalRole.RECRUITER, PrincipalRole.ADMIN)


async def require_admin(principal: CurrentPrincipalDep) -> Principal:
    """Admins only."""
    return _require_roles(principal, PrincipalRole.ADMIN)


RecruiterDep = Annotated[Principal, Depends(require_recruiter)]
SearchPrincipalDep = Annotated[Principal, Depends(require_search_access)]
AdminDep = Annotated[Principal, Depends(require_admin)]


# Application Service Dependencies
async def get_search_service() -> TalentSearchService:
    """Resolve TalentSearchService from providers."""
    try:
        return await get_talent_search_service()
    except Exception as e:
        logger.error("Failed to create talent search service", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search service unavailable"
        ) from e


async def get_favorites() -> FavoriteLedgerService:
    """Resolve FavoriteLedgerService from providers."""
    try:
        return await get_favorite_service()
    except Exception as e:
        logger.error("Failed to create favorite service", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Favorite service unavailable"
        ) from e


async def get_analysis() -> Optional[PlayerAnalysisService]:
    """Resolve PlayerAnalysisService; None when no analysis model is configured."""
    try:
        return await get_analysis_service()
    except Exception as e:
        logger.error("Failed to create analysis service", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service unavailable"
        ) from e


async def get_refresh_service() -> EmbeddingRefreshService:
    """Resolve EmbeddingRefreshService from providers."""
    try:
        return await get_embedding_refresh_service()
    except Exception as e:
        logger.error("Failed to create embedding refresh service", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Embedding service unavailable"
        ) from e


SearchServiceDep = Annotated[TalentSearchService, Depends(get_search_service)]
FavoriteServiceDep = Annotated[FavoriteLedgerService, Depends(get_favorites)]
AnalysisServiceDep = Annotated[Optional[PlayerAnalysisService], Depends(get_analysis)]
RefreshServiceDep = Annotated[EmbeddingRefreshService, Depends(get_refresh_service)]


# Domain Exception Handlers
def map_domain_exception_to_http(exception: Exception) -> HTTPException:
    """Map domain exceptions to appropriate HTTP responses."""

    # NotFoundError hierarchy - 404 Not Found
    if isinstance(exception, NotFoundError):
        return HTTPException(status_code=404, detail=str(exception))

    # ValidationError hierarchy - 400 Bad Request
    elif isinstance(exception, ValidationError):
        return HTTPException(status_code=400, detail=str(exception))

    # UnauthorizedError - 401 Unauthorized
    elif isinstance(exception, UnauthorizedError):
        return HTTPException(status_code=401, detail=str(exception))

    # AuthorizationError hierarchy - 403 Forbidden
    elif isinstance(exception, (ForbiddenError, AuthorizationError)):
        return HTTPException(status_code=403, detail=str(exception))

    # Unavailable collaborators and failed pipelines - 503 Service Unavailable
    elif isinstance(
        exception,
        (SearchFailedError, AnalysisUnavailableError, CollaboratorUnavailableError, PersistenceError),
    ):
        logger.warning("Service unavailable", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=503, detail=str(exception))

    # Other ProcessingError - 422 Unprocessable Entity
    elif isinstance(exception, ProcessingError):
        return HTTPException(status_code=422, detail=str(exception))

    # ConfigurationError - 503, the feature is not configured on this deployment
    elif isinstance(exception, ConfigurationError):
        logger.error("Configuration error", error=str(exception))
        return HTTPException(status_code=503, detail=str(exception))

    # Generic DomainException - 500 Internal Server Error
    elif isinstance(exception, DomainException):
        logger.error("Unhandled domain exception", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=500, detail="Domain operation failed")

    else:
        logger.error("Non-domain exception in mapping", exception_type=type(exception).__name__, error=str(exception))
        return HTTPException(status_code=500, detail="Internal server error")


__all__ = [
    "get_current_principal",
    "require_recruiter",
    "require_search_access",
    "require_admin",
    "get_search_service",
    "get_favorites",
    "get_analysis",
    "get_refresh_service",
    "CurrentPrincipalDep",
    "RecruiterDep",
    "SearchPrincipalDep",
    "AdminDep",
    "SearchServiceDep",
    "FavoriteServiceDep",
    "AnalysisServiceDep",
    "RefreshServiceDep",
    "map_domain_exception_to_http",
]
