from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from app.application.dto.auth import AccountOutput
from app.domain.entities.user import UserAccount


Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def build_account_output(user: UserAccount) -> AccountOutput:
    return AccountOutput(
        id=user.id,
        name=user.name,
        email=user.email,
        tier=user.tier,
        status=user.status,
        period_start=user.period_start,
        period_end=user.period_end,
    )
