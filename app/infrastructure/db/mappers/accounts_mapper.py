from __future__ import annotations

import json
from typing import Any, Mapping

from app.domain.entities.pending_activation import PendingActivation
from app.domain.entities.user import UserAccount


def _as_str(value: Any) -> str:
    return str(value)


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_payload(value: Any) -> dict | None:
    if value is None:
        return None
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return dict(value)


def map_row_to_user_account(row: Mapping[str, Any]) -> UserAccount:
    return UserAccount(
        id=_as_str(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row.get("password_hash"),
        tier=row.get("subscription_tier"),
        status=row.get("subscription_status") or "none",
        period_start=row.get("subscription_start_date"),
        period_end=row.get("subscription_end_date"),
        external_sale_reference=_as_optional_str(row.get("external_sale_reference")),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_pending_activation(row: Mapping[str, Any]) -> PendingActivation:
    return PendingActivation(
        id=_as_str(row["id"]),
        email=row["email"],
        tier=row["subscription_tier"],
        period_start=row["subscription_start_date"],
        period_end=row["subscription_end_date"],
        external_sale_reference=_as_optional_str(row.get("external_sale_reference")),
        raw_payload=_as_payload(row.get("raw_payload")),
        activated=bool(row["activated"]),
        activated_at=row.get("activated_at"),
        created_at=row["created_at"],
    )
