from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)


class AccountResponse(BaseModel):
    id: str
    name: str
    email: str
    tier: str | None
    status: str
    period_start: datetime | None
    period_end: datetime | None


class SignupResponse(BaseModel):
    user: AccountResponse
    pending_applied: bool
