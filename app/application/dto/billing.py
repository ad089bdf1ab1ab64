from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from app.domain.entities.purchase_event import PurchaseEvent


ActivationStatus = Literal["activated", "pending", "skipped"]


@dataclass(frozen=True)
class PaymentWebhookInput:
    signature: str | None
    payload: bytes


@dataclass(frozen=True)
class PaymentNotification:
    event_type: str
    purchase: PurchaseEvent | None


@dataclass(frozen=True)
class ActivationResult:
    status: ActivationStatus
    tier: str | None
    email: str
    period_start: datetime | None = None
    period_end: datetime | None = None
    reason: str | None = None


@dataclass(frozen=True)
class PaymentWebhookOutput:
    event_type: str
    result: ActivationResult | None
