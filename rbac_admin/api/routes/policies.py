"""
Policy routes.

Direct view and edit of the live policy set. Edits made here are not
reflected in role_permissions and are overwritten by the next full
synchronization.
"""

from fastapi import APIRouter, Depends, Query

from rbac_admin.api.dependencies.permissions import require_policy
from rbac_admin.api.dependencies.services import get_policy_admin
from rbac_admin.core.rbac import PolicyAdmin
from rbac_admin.schemas.policy import (
    PolicyListResponse,
    PolicyMutationResponse,
    PolicyRequest,
    PolicyResponse,
    SyncResponse,
)

router = APIRouter(dependencies=[Depends(require_policy)])


@router.get("", response_model=PolicyListResponse)
async def list_policies(
    role: str | None = Query(None),
    policy_admin: PolicyAdmin = Depends(get_policy_admin),
):
    """List the live policy tuples, optionally for one role."""
    policies = policy_admin.list_policies(role)
    return PolicyListResponse(
        policies=[PolicyResponse(role=p.role, resource=p.resource, action=p.action) for p in policies],
        total=len(policies),
        version=policy_admin.enforcer.version,
    )


@router.post("", response_model=PolicyMutationResponse)
async def add_policy(
    data: PolicyRequest,
    policy_admin: PolicyAdmin = Depends(get_policy_admin),
):
    """Grant a tuple."""
    result = await policy_admin.add_policy(data.role, data.resource, data.action)
    return PolicyMutationResponse(changed=result.changed, persisted=result.persisted)


@router.delete("", response_model=PolicyMutationResponse)
async def remove_policy(
    data: PolicyRequest,
    policy_admin: PolicyAdmin = Depends(get_policy_admin),
):
    """Revoke a tuple."""
    result = await policy_admin.remove_policy(data.role, data.resource, data.action)
    return PolicyMutationResponse(changed=result.changed, persisted=result.persisted)


@router.post("/sync", response_model=SyncResponse)
async def synchronize_policies(
    policy_admin: PolicyAdmin = Depends(get_policy_admin),
):
    """Rebuild the policy set from role/permission associations."""
    result = await policy_admin.synchronize()
    return SyncResponse(count=result.count, version=result.version, persisted=result.persisted)
