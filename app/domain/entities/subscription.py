from __future__ import annotations

from datetime import datetime
from typing import Literal


SubscriptionStatus = Literal[
    "active",
    "expired",
    "cancelled",
    "none",
]


def is_subscription_active(status: str, period_end: datetime | None, *, now: datetime) -> bool:
    return status == "active" and period_end is not None and period_end > now


def status_for_period(period_end: datetime, *, now: datetime) -> SubscriptionStatus:
    if period_end > now:
        return "active"
    return "expired"
