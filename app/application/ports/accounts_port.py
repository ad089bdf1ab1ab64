from __future__ import annotations

from datetime import datetime
from typing import Protocol

from app.domain.entities.user import UserAccount


class AccountsPort(Protocol):
    def find_user_by_email(self, *, email: str) -> UserAccount | None:
        ...

    def get_user_by_id(self, *, user_id: str) -> UserAccount | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ) -> UserAccount:
        ...

    def update_subscription(
        self,
        *,
        user_id: str,
        tier: str,
        status: str,
        period_start: datetime,
        period_end: datetime,
        sale_ref: str | None,
        now: datetime,
    ) -> None:
        ...

    def expire_subscriptions(self, *, now: datetime) -> list[UserAccount]:
        ...
