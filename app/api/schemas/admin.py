from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class PendingActivationResponse(BaseModel):
    id: str
    email: str
    tier: str
    period_start: datetime
    period_end: datetime
    external_sale_reference: str | None
    activated: bool
    activated_at: datetime | None
    created_at: datetime


class ActivatePendingRequest(BaseModel):
    tier: str | None = None


class ActivatePendingResponse(BaseModel):
    pending_id: str
    user_id: str
    email: str
    tier: str
    period_start: datetime
    period_end: datetime


class DeletePendingResponse(BaseModel):
    ok: bool


class ExpiredUserResponse(BaseModel):
    id: str
    email: str
    name: str
    tier: str | None
    period_end: datetime | None


class ExpireSubscriptionsResponse(BaseModel):
    expired_count: int
    expired_users: list[ExpiredUserResponse]
    ran_at: datetime
