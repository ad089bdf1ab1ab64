from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class VerifyPurchaseRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class VerifyPurchaseResponse(BaseModel):
    email: str
    can_signup: bool
    source: str | None
    tier: str | None
    duration_days: int | None
    period_start: datetime | None
    period_end: datetime | None
    sale_reference: str | None
