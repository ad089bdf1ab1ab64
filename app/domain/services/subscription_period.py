from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class SubscriptionPeriod:
    start: datetime
    end: datetime


def compute_period(*, now: datetime, duration_days: int) -> SubscriptionPeriod:
    if duration_days <= 0:
        raise ValueError("duration_days must be positive.")
    return SubscriptionPeriod(start=now, end=now + timedelta(days=duration_days))
