from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.user import UserAccount


@dataclass(frozen=True)
class ActivatePendingInput:
    pending_id: str
    tier: str | None


@dataclass(frozen=True)
class ActivatePendingOutput:
    pending_id: str
    user_id: str
    email: str
    tier: str
    period_start: datetime
    period_end: datetime


@dataclass(frozen=True)
class ExpireSubscriptionsOutput:
    expired_count: int
    expired_users: list[UserAccount]
    ran_at: datetime
