from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from app.domain.entities.pending_activation import PendingActivation


class PendingActivationsPort(Protocol):
    def upsert_pending_activation(
        self,
        *,
        email: str,
        tier: str,
        period_start: datetime,
        period_end: datetime,
        sale_ref: str | None,
        raw_payload: dict[str, Any] | None,
        now: datetime,
        activated: bool = False,
    ) -> PendingActivation:
        ...

    def find_unresolved_pending(self, *, email: str) -> PendingActivation | None:
        ...

    def get_pending_by_id(self, *, pending_id: str) -> PendingActivation | None:
        ...

    def mark_pending_activated(self, *, pending_id: str, now: datetime) -> None:
        ...

    def list_pending_activations(self, *, only_unresolved: bool) -> list[PendingActivation]:
        ...

    def delete_pending_activation(self, *, pending_id: str) -> bool:
        ...
