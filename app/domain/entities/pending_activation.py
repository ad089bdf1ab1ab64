from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class PendingActivation:
    id: str
    email: str
    tier: str
    period_start: datetime
    period_end: datetime
    external_sale_reference: str | None
    raw_payload: dict[str, Any] | None
    activated: bool
    activated_at: datetime | None
    created_at: datetime
