"""Entitlement lookups against the billing system's feature grants."""

from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from sqlalchemy import String, cast, exists, or_, select

from talent_search.domain.exceptions import EntitlementUnavailableError, PersistenceError
from talent_search.domain.interfaces import IEntitlementService
from talent_search.infrastructure.persistence.models.read_models import FeatureEntitlementTable
from talent_search.infrastructure.persistence.repositories.base import PostgresRepository

logger = structlog.get_logger(__name__)


class PostgresEntitlementService(PostgresRepository, IEntitlementService):
    """A feature is granted by an unexpired row for (principal, feature key)."""

    async def has_feature(self, principal_id: str, feature_key: str) -> bool:
        now = datetime.now(timezone.utc)
        try:
            async with self.session("check entitlement") as session:
                result = await session.execute(
                    select(
                        exists().where(
                            cast(FeatureEntitlementTable.principal_id, String) == principal_id,
                            FeatureEntitlementTable.feature_key == feature_key,
                            or_(
                                FeatureEntitlementTable.expires_at.is_(None),
                                FeatureEntitlementTable.expires_at > now,
                            ),
                        )
                    )
                )
                return bool(result.scalar())
        except PersistenceError as e:
            logger.warning("Entitlement check failed", principal_id=principal_id, feature_key=feature_key)
            raise EntitlementUnavailableError(f"Entitlement check failed: {e}") from e

    async def check_health(self) -> Dict[str, Any]:
        return await self.db_manager.health_check()
