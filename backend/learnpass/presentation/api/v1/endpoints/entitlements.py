"""Entitlement status and administration endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from learnpass.application.schemas import AdminGrantRequest, EntitlementResponse
from learnpass.application.services import EntitlementManager
from learnpass.domain.entities import Entitlement
from learnpass.domain.identity import IdentityResolver
from learnpass.infrastructure.dependencies import (
    get_entitlement_manager,
    get_identity_resolver,
    require_admin_token,
)

router = APIRouter(prefix="/entitlements", tags=["Entitlements"])
admin_router = APIRouter(
    prefix="/admin/entitlements",
    tags=["Admin"],
    dependencies=[Depends(require_admin_token)],
)


def _to_response(entitlement: Entitlement) -> EntitlementResponse:
    return EntitlementResponse(
        user_id=entitlement.user_id,
        plan_type=entitlement.plan_type,
        status=entitlement.status.value,
        current_period_start=entitlement.current_period_start,
        current_period_end=entitlement.current_period_end,
        was_granted=entitlement.was_granted,
        active=entitlement.is_current(),
    )


@router.get("/{external_id}", response_model=EntitlementResponse)
async def get_entitlement(
    external_id: str,
    manager: EntitlementManager = Depends(get_entitlement_manager),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> EntitlementResponse:
    """Current subscription for an identity-provider subject."""
    entitlement = await manager.get(resolver.resolve(external_id))
    if entitlement is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No subscription for '{external_id}'",
        )
    return _to_response(entitlement)


@admin_router.post("", response_model=EntitlementResponse, status_code=status.HTTP_201_CREATED)
async def grant_entitlement(
    data: AdminGrantRequest,
    manager: EntitlementManager = Depends(get_entitlement_manager),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> EntitlementResponse:
    """Grant a plan without a purchase, overwriting any current one."""
    entitlement = await manager.grant_by_admin(
        resolver.resolve(data.external_id), data.plan_type, data.months
    )
    return _to_response(entitlement)


@admin_router.delete("/{external_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_entitlement(
    external_id: str,
    manager: EntitlementManager = Depends(get_entitlement_manager),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> None:
    if not await manager.revoke(resolver.resolve(external_id)):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No subscription for '{external_id}'",
        )
