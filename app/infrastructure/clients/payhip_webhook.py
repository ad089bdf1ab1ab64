from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any

from app.application.dto.billing import PaymentNotification
from app.application.ports.payment_webhook_port import PaymentWebhookPort
from app.domain.entities.purchase_event import PurchaseEvent
from app.domain.exceptions import MalformedPurchaseEventError, WebhookSignatureError

from .payload_utils import as_label, as_object, as_reference, load_json_object, to_decimal


logger = logging.getLogger(__name__)

# O Payhip nao e consistente sobre onde manda a variante comprada.
VARIANT_FIELDS = (
    "variant_name",
    "variant",
    "variant_title",
    "option_name",
    "option",
    "product_variant",
    "plan_name",
    "plan",
)


class PayhipWebhookParser(PaymentWebhookPort):
    """Normaliza webhooks do Payhip.

    O corpo traz ``signature`` = SHA-256 hexadecimal da API key da loja. O
    valor (``amount``/``price``) ja vem em unidades inteiras da moeda.
    """

    def __init__(self, *, api_key: str):
        self._expected_signature = hashlib.sha256(api_key.encode("utf-8")).hexdigest()

    def parse_notification(self, *, signature: str | None, payload: bytes) -> PaymentNotification:
        data = load_json_object(payload)
        self._verify_signature(signature or as_label(data.get("signature")))

        event_type = as_label(data.get("type")).lower() or "paid"
        first_item = _first_item(data)

        purchase = PurchaseEvent(
            provider="payhip",
            email=as_label(data.get("buyer_email") or data.get("email")),
            amount=to_decimal(_first_present(data, ("amount", "price"))),
            variant_label=_variant_label(data, first_item),
            product_label=as_label(data.get("product_name") or first_item.get("product_name")),
            sale_reference=as_reference(data.get("sale_id") or data.get("id")),
            payment_status=event_type,
            raw_payload=data,
        )
        logger.info(
            "payhip_webhook: sale email=%s type=%s amount=%s variant=%s product=%s",
            purchase.email,
            event_type,
            purchase.amount,
            purchase.variant_label,
            purchase.product_label,
        )
        return PaymentNotification(event_type=event_type, purchase=purchase)

    def _verify_signature(self, signature: str) -> None:
        if not signature:
            raise WebhookSignatureError("Missing Payhip signature.")
        if not hmac.compare_digest(self._expected_signature, signature.strip().lower()):
            raise WebhookSignatureError("Invalid Payhip signature.")


def _first_item(data: dict[str, Any]) -> dict[str, Any]:
    items = data.get("items")
    if items is None:
        return {}
    if not isinstance(items, list):
        raise MalformedPurchaseEventError("Webhook field 'items' must be a JSON list.")
    if not items:
        return {}
    return as_object(items[0], "items[0]")


def _first_present(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


def _variant_label(data: dict[str, Any], first_item: dict[str, Any]) -> str:
    for source in (data, first_item):
        value = _first_present(source, VARIANT_FIELDS)
        if value is not None:
            return as_label(value)
    return ""
