from __future__ import annotations

from decimal import Decimal
import hashlib
import hmac
import json
import time

import pytest

from app.infrastructure.clients.lemonsqueezy_webhook import LemonSqueezyWebhookParser
from app.infrastructure.clients.payhip_webhook import PayhipWebhookParser
from app.infrastructure.clients.stripe_client import StripeClient
from app.domain.exceptions import MalformedPurchaseEventError, WebhookSignatureError


LS_SECRET = "ls-secret"
PAYHIP_KEY = "payhip-key"
STRIPE_WEBHOOK_SECRET = "whsec_test"


def _ls_body(**attributes) -> bytes:
    base = {
        "user_email": " Buyer@Example.com ",
        "total": 9999,
        "status": "paid",
        "first_order_item": {"variant_name": "Pro 6 months", "product_name": "Diet Coach", "variant_id": 11},
    }
    base.update(attributes)
    return json.dumps({"meta": {"event_name": "order_created"}, "data": {"id": "1001", "attributes": base}}).encode()


def _ls_sign(body: bytes) -> str:
    return hmac.new(LS_SECRET.encode(), body, hashlib.sha256).hexdigest()


def test_lemonsqueezy_order_is_normalized():
    body = _ls_body()

    notification = LemonSqueezyWebhookParser(webhook_secret=LS_SECRET).parse_notification(
        signature=_ls_sign(body),
        payload=body,
    )

    purchase = notification.purchase
    assert notification.event_type == "order_created"
    assert purchase.provider == "lemonsqueezy"
    assert purchase.email == "Buyer@Example.com"
    assert purchase.amount == Decimal("99.99")
    assert purchase.variant_label == "Pro 6 months"
    assert purchase.product_label == "Diet Coach"
    assert purchase.sale_reference == "1001"
    assert purchase.is_paid


def test_lemonsqueezy_other_events_are_ignored():
    body = json.dumps({"meta": {"event_name": "subscription_updated"}, "data": {}}).encode()

    notification = LemonSqueezyWebhookParser(webhook_secret=LS_SECRET).parse_notification(
        signature=_ls_sign(body),
        payload=body,
    )

    assert notification.event_type == "subscription_updated"
    assert notification.purchase is None


@pytest.mark.parametrize("signature", [None, "", "deadbeef"])
def test_lemonsqueezy_rejects_bad_signature(signature):
    with pytest.raises(WebhookSignatureError):
        LemonSqueezyWebhookParser(webhook_secret=LS_SECRET).parse_notification(
            signature=signature,
            payload=_ls_body(),
        )


def test_lemonsqueezy_rejects_non_json_body():
    body = b"not-json"

    with pytest.raises(MalformedPurchaseEventError):
        LemonSqueezyWebhookParser(webhook_secret=LS_SECRET).parse_notification(
            signature=_ls_sign(body),
            payload=body,
        )


def _payhip_body(**fields) -> bytes:
    base = {
        "sale_id": "PH-1",
        "product_id": "p1",
        "product_name": "Diet Plan",
        "buyer_email": "a@x.com",
        "amount": "4.99",
        "type": "paid",
        "signature": hashlib.sha256(PAYHIP_KEY.encode()).hexdigest(),
    }
    base.update(fields)
    return json.dumps(base).encode()


def test_payhip_sale_reads_variant_from_alternative_fields():
    notification = PayhipWebhookParser(api_key=PAYHIP_KEY).parse_notification(
        signature=None,
        payload=_payhip_body(plan_name="Elite Yearly"),
    )

    purchase = notification.purchase
    assert purchase.provider == "payhip"
    assert purchase.variant_label == "Elite Yearly"
    assert purchase.amount == Decimal("4.99")
    assert purchase.sale_reference == "PH-1"
    assert purchase.payment_status == "paid"


def test_payhip_items_payload_shape_is_supported():
    body = json.dumps(
        {
            "id": "ZX9",
            "email": "b@x.com",
            "price": 0,
            "type": "paid",
            "items": [{"product_name": "Basic Month", "product_id": "p2"}],
            "signature": hashlib.sha256(PAYHIP_KEY.encode()).hexdigest(),
        }
    ).encode()

    purchase = PayhipWebhookParser(api_key=PAYHIP_KEY).parse_notification(signature=None, payload=body).purchase

    assert purchase.email == "b@x.com"
    assert purchase.product_label == "Basic Month"
    assert purchase.amount == Decimal("0")
    assert purchase.sale_reference == "ZX9"


def test_payhip_refund_keeps_status_for_skip():
    notification = PayhipWebhookParser(api_key=PAYHIP_KEY).parse_notification(
        signature=None,
        payload=_payhip_body(type="refunded"),
    )

    assert notification.event_type == "refunded"
    assert notification.purchase.is_paid is False


def test_payhip_rejects_wrong_signature():
    with pytest.raises(WebhookSignatureError):
        PayhipWebhookParser(api_key=PAYHIP_KEY).parse_notification(
            signature=None,
            payload=_payhip_body(signature="nope"),
        )


def _stripe_header(body: bytes) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{body.decode()}".encode()
    digest = hmac.new(STRIPE_WEBHOOK_SECRET.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def test_stripe_checkout_with_full_discount_counts_as_paid():
    body = json.dumps(
        {
            "id": "evt_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {
                "object": {
                    "id": "cs_test_1",
                    "object": "checkout.session",
                    "amount_total": 0,
                    "payment_status": "no_payment_required",
                    "customer_details": {"email": "c@x.com"},
                    "metadata": {"plan": "Elite"},
                }
            },
        }
    ).encode()

    notification = StripeClient(secret_key="sk_test", webhook_secret=STRIPE_WEBHOOK_SECRET).parse_notification(
        signature=_stripe_header(body),
        payload=body,
    )

    purchase = notification.purchase
    assert purchase.provider == "stripe"
    assert purchase.email == "c@x.com"
    assert purchase.amount == Decimal("0")
    assert purchase.variant_label == "Elite"
    assert purchase.sale_reference == "cs_test_1"
    assert purchase.is_paid


def test_stripe_requires_signature_header():
    with pytest.raises(WebhookSignatureError):
        StripeClient(secret_key="sk_test", webhook_secret=STRIPE_WEBHOOK_SECRET).parse_notification(
            signature=None,
            payload=b"{}",
        )


def test_payhip_non_finite_amount_is_treated_as_missing():
    body = _payhip_body(amount=float("nan"))
    assert b"NaN" in body

    purchase = PayhipWebhookParser(api_key=PAYHIP_KEY).parse_notification(signature=None, payload=body).purchase

    assert purchase.amount is None


def test_lemonsqueezy_infinite_total_is_treated_as_missing():
    body = _ls_body(total="Infinity")

    purchase = LemonSqueezyWebhookParser(webhook_secret=LS_SECRET).parse_notification(
        signature=_ls_sign(body),
        payload=body,
    ).purchase

    assert purchase.amount is None


@pytest.mark.parametrize(
    "document",
    [
        {"meta": "oops"},
        {"meta": {"event_name": "order_created"}, "data": "oops"},
        {"meta": {"event_name": "order_created"}, "data": {"id": "1", "attributes": ["x"]}},
        {"meta": {"event_name": "order_created"}, "data": {"id": "1", "attributes": {"first_order_item": 3}}},
    ],
)
def test_lemonsqueezy_wrongly_typed_fields_are_malformed(document):
    body = json.dumps(document).encode()

    with pytest.raises(MalformedPurchaseEventError):
        LemonSqueezyWebhookParser(webhook_secret=LS_SECRET).parse_notification(
            signature=_ls_sign(body),
            payload=body,
        )


@pytest.mark.parametrize("items", [{"product_name": "Basic"}, ["Basic"], "Basic"])
def test_payhip_wrongly_typed_items_are_malformed(items):
    with pytest.raises(MalformedPurchaseEventError):
        PayhipWebhookParser(api_key=PAYHIP_KEY).parse_notification(
            signature=None,
            payload=_payhip_body(items=items),
        )


def test_stripe_wrongly_typed_session_is_malformed():
    body = json.dumps(
        {
            "id": "evt_2",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {"object": {"id": "cs_test_2", "object": "checkout.session", "metadata": "Elite"}},
        }
    ).encode()

    with pytest.raises(MalformedPurchaseEventError):
        StripeClient(secret_key="sk_test", webhook_secret=STRIPE_WEBHOOK_SECRET).parse_notification(
            signature=_stripe_header(body),
            payload=body,
        )
