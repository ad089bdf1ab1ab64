from __future__ import annotations

from typing import Protocol

from app.application.dto.billing import PaymentNotification


class PaymentWebhookPort(Protocol):
    def parse_notification(self, *, signature: str | None, payload: bytes) -> PaymentNotification:
        ...
