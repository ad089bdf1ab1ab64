from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RegisterUserInput:
    name: str
    email: str
    password: str


@dataclass(frozen=True)
class AccountOutput:
    id: str
    name: str
    email: str
    tier: str | None
    status: str
    period_start: datetime | None
    period_end: datetime | None


@dataclass(frozen=True)
class RegisterUserOutput:
    user: AccountOutput
    pending_applied: bool
