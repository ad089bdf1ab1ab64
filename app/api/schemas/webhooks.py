from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class WebhookResultResponse(BaseModel):
    received: bool = True
    event_type: str
    status: Literal["activated", "pending", "skipped", "ignored"]
    tier: str | None = None
    email: str | None = None
    period_end: datetime | None = None
    reason: str | None = None


class WebhookReadyResponse(BaseModel):
    provider: str
    status: str = "ready"
    events: list[str]
