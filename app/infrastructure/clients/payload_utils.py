from __future__ import annotations

from decimal import Decimal, InvalidOperation
import json
from typing import Any

from app.domain.exceptions import MalformedPurchaseEventError


def load_json_object(payload: bytes) -> dict[str, Any]:
    try:
        data = json.loads(payload or b"")
    except (ValueError, UnicodeDecodeError) as exc:
        raise MalformedPurchaseEventError("Webhook payload is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise MalformedPurchaseEventError("Webhook payload must be a JSON object.")
    return data


def as_object(value: Any, field: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedPurchaseEventError(f"Webhook field '{field}' must be a JSON object.")
    return value


def to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    # NaN e Infinity passam pelo json.loads e pelo construtor do Decimal.
    if not amount.is_finite():
        return None
    return amount


def cents_to_amount(value: Any) -> Decimal | None:
    cents = to_decimal(value)
    if cents is None:
        return None
    return cents / Decimal(100)


def as_label(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def as_reference(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
