from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from app.domain.exceptions import PurchaseLookupError
from app.infrastructure.clients.payhip_client import PayhipClientSettings, PayhipSalesClient


def _client_with(monkeypatch: pytest.MonkeyPatch, handler) -> PayhipSalesClient:
    transport = httpx.MockTransport(handler)
    real_client = httpx.Client

    monkeypatch.setattr(
        "app.infrastructure.clients.payhip_client.httpx.Client",
        lambda **kwargs: real_client(transport=transport, **kwargs),
    )
    return PayhipSalesClient(
        PayhipClientSettings(api_base="https://payhip.test/api/v1/", api_key="key-1", timeout_seconds=5)
    )


def test_find_latest_sale_returns_most_recent_match(monkeypatch: pytest.MonkeyPatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["api_key"] = request.headers.get("payhip-api-key")
        return httpx.Response(
            200,
            json={
                "sales": [
                    {"sale_id": "s3", "buyer_email": "other@x.com", "sale_price": "9"},
                    {"sale_id": "s2", "buyer_email": "A@X.com", "product_name": "Diet", "variant_name": "Pro", "sale_price": "4.5"},
                    {"sale_id": "s1", "buyer_email": "a@x.com", "variant_name": "Basic", "sale_price": "1"},
                ]
            },
        )

    client = _client_with(monkeypatch, handler)

    sale = client.find_latest_sale(email="a@x.com")

    assert seen == {"url": "https://payhip.test/api/v1/sales", "api_key": "key-1"}
    assert sale.sale_id == "s2"
    assert sale.variant_name == "Pro"
    assert sale.amount == Decimal("4.5")


def test_find_latest_sale_without_match(monkeypatch: pytest.MonkeyPatch):
    client = _client_with(monkeypatch, lambda request: httpx.Response(200, json={"sales": []}))

    assert client.find_latest_sale(email="a@x.com") is None


def test_http_error_becomes_purchase_lookup_error(monkeypatch: pytest.MonkeyPatch):
    client = _client_with(monkeypatch, lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(PurchaseLookupError):
        client.find_latest_sale(email="a@x.com")
