from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.subscription import SubscriptionStatus


@dataclass(frozen=True)
class UserAccount:
    id: str
    name: str
    email: str
    password_hash: str | None
    tier: str | None
    status: SubscriptionStatus
    period_start: datetime | None
    period_end: datetime | None
    external_sale_reference: str | None
    created_at: datetime
    updated_at: datetime
