from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal


@dataclass(frozen=True)
class PayhipSale:
    sale_id: str | None
    buyer_email: str
    product_name: str
    variant_name: str
    amount: Decimal | None


@dataclass(frozen=True)
class VerifyPurchaseInput:
    email: str


@dataclass(frozen=True)
class VerifyPurchaseOutput:
    email: str
    can_signup: bool
    source: Literal["pending", "payhip"] | None
    tier: str | None
    duration_days: int | None
    period_start: datetime | None
    period_end: datetime | None
    sale_reference: str | None
