"""
Shared service plumbing.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_admin.core.rbac import PolicyAdmin, SourceQueryError

logger = structlog.get_logger(__name__)


class PolicyAwareService:
    """
    Base for services whose writes change the role/permission associations.

    After such a write the transaction is committed and the live policy set
    is rebuilt, so the enforcer never lags a committed change. A failed
    rebuild is logged and left to the next synchronization; the committed
    change stands.
    """

    def __init__(self, db: AsyncSession, policy_admin: PolicyAdmin):
        self.db = db
        self.policy_admin = policy_admin

    async def _commit_and_synchronize(self, reason: str) -> None:
        await self.db.commit()
        try:
            await self.policy_admin.synchronize()
        except SourceQueryError as e:
            logger.error("policy.resync_failed", reason=reason, error=str(e))
