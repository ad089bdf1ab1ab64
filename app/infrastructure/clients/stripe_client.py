from __future__ import annotations

import logging

import stripe

from app.application.dto.billing import PaymentNotification
from app.application.ports.payment_webhook_port import PaymentWebhookPort
from app.domain.entities.purchase_event import PurchaseEvent
from app.domain.exceptions import MalformedPurchaseEventError, WebhookSignatureError

from .payload_utils import as_label, as_object, as_reference, cents_to_amount, load_json_object


logger = logging.getLogger(__name__)

PURCHASE_EVENT = "checkout.session.completed"

# Cupom de 100% fecha a sessao com "no_payment_required"; conta como pago.
PAID_STATUSES = {"paid", "no_payment_required"}


class StripeClient(PaymentWebhookPort):
    def __init__(self, *, secret_key: str, webhook_secret: str):
        stripe.api_key = secret_key
        self._webhook_secret = webhook_secret

    def parse_notification(self, *, signature: str | None, payload: bytes) -> PaymentNotification:
        if not signature:
            raise WebhookSignatureError("Missing Stripe signature.")
        try:
            stripe.Webhook.construct_event(payload=payload, sig_header=signature, secret=self._webhook_secret)
        except ValueError as exc:
            raise MalformedPurchaseEventError("Stripe webhook payload is not valid JSON.") from exc
        except Exception as exc:  # pragma: no cover - external API
            raise WebhookSignatureError("Invalid Stripe webhook signature.") from exc

        event = load_json_object(payload)
        event_type = as_label(event.get("type"))
        if event_type != PURCHASE_EVENT:
            return PaymentNotification(event_type=event_type or "unknown", purchase=None)

        session = as_object(as_object(event.get("data"), "data").get("object"), "data.object")
        customer_details = as_object(session.get("customer_details"), "customer_details")
        metadata = as_object(session.get("metadata"), "metadata")
        payment_status = as_label(session.get("payment_status")).lower()

        purchase = PurchaseEvent(
            provider="stripe",
            email=as_label(customer_details.get("email") or session.get("customer_email")),
            amount=cents_to_amount(session.get("amount_total")),
            variant_label=as_label(metadata.get("variant") or metadata.get("plan")),
            product_label=as_label(metadata.get("product")),
            sale_reference=as_reference(session.get("id")),
            payment_status="paid" if payment_status in PAID_STATUSES else payment_status,
            raw_payload=event,
        )
        logger.info(
            "stripe_client: checkout_completed email=%s payment_status=%s amount=%s",
            purchase.email,
            payment_status,
            purchase.amount,
        )
        return PaymentNotification(event_type=event_type, purchase=purchase)
