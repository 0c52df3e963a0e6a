"""Pydantic DTOs for entitlement status and administration."""

from datetime import datetime

from pydantic import BaseModel, Field


class EntitlementResponse(BaseModel):
    user_id: str
    plan_type: str
    status: str
    current_period_start: datetime
    current_period_end: datetime
    was_granted: bool
    active: bool


class AdminGrantRequest(BaseModel):
    """Grant a plan without a purchase."""

    external_id: str = Field(..., min_length=1)
    plan_type: str = Field("pro", min_length=1)
    months: int = Field(1, ge=1, le=24)
