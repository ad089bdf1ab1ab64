from __future__ import annotations

import hashlib
import hmac
import logging

from app.application.dto.billing import PaymentNotification
from app.application.ports.payment_webhook_port import PaymentWebhookPort
from app.domain.entities.purchase_event import PurchaseEvent
from app.domain.exceptions import WebhookSignatureError

from .payload_utils import as_label, as_object, as_reference, cents_to_amount, load_json_object


logger = logging.getLogger(__name__)

PURCHASE_EVENT = "order_created"


class LemonSqueezyWebhookParser(PaymentWebhookPort):
    """Valida e normaliza webhooks da Lemon Squeezy.

    A assinatura (header ``X-Signature``) e o HMAC-SHA256 hexadecimal do corpo
    bruto com o segredo do webhook. Somente ``order_created`` vira compra;
    ``total`` chega em centavos.
    """

    def __init__(self, *, webhook_secret: str):
        self._webhook_secret = webhook_secret

    def parse_notification(self, *, signature: str | None, payload: bytes) -> PaymentNotification:
        self._verify_signature(signature=signature, payload=payload)

        data = load_json_object(payload)
        event_name = as_label(as_object(data.get("meta"), "meta").get("event_name"))
        if event_name != PURCHASE_EVENT:
            return PaymentNotification(event_type=event_name or "unknown", purchase=None)

        order = as_object(data.get("data"), "data")
        attributes = as_object(order.get("attributes"), "data.attributes")
        first_item = as_object(attributes.get("first_order_item"), "data.attributes.first_order_item")

        purchase = PurchaseEvent(
            provider="lemonsqueezy",
            email=as_label(attributes.get("user_email")),
            amount=cents_to_amount(attributes.get("total")),
            variant_label=as_label(first_item.get("variant_name")),
            product_label=as_label(first_item.get("product_name")),
            sale_reference=as_reference(order.get("id")),
            payment_status=as_label(attributes.get("status")).lower(),
            raw_payload=data,
        )
        logger.info(
            "lemonsqueezy_webhook: order email=%s status=%s total=%s variant=%s",
            purchase.email,
            purchase.payment_status,
            purchase.amount,
            purchase.variant_label,
        )
        return PaymentNotification(event_type=event_name, purchase=purchase)

    def _verify_signature(self, *, signature: str | None, payload: bytes) -> None:
        if not signature:
            raise WebhookSignatureError("Missing Lemon Squeezy signature.")
        digest = hmac.new(self._webhook_secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(digest, signature.strip()):
            raise WebhookSignatureError("Invalid Lemon Squeezy signature.")
