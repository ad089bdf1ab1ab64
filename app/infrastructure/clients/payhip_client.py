from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import httpx

from app.application.dto.purchases import PayhipSale
from app.application.ports.payhip_sales_port import PayhipSalesPort
from app.domain.exceptions import PurchaseLookupError

from .payload_utils import as_label, as_reference, to_decimal


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayhipClientSettings:
    api_base: str
    api_key: str
    timeout_seconds: float


class PayhipSalesClient(PayhipSalesPort):
    def __init__(self, settings: PayhipClientSettings):
        self._settings = settings

    def find_latest_sale(self, *, email: str) -> PayhipSale | None:
        sales = self._fetch_sales()
        email_l = email.strip().lower()
        matches = [sale for sale in sales if as_label(sale.get("buyer_email")).lower() == email_l]
        logger.info(
            "payhip_client: sales_lookup email=%s total_sales=%s matches=%s",
            email_l,
            len(sales),
            len(matches),
        )
        if not matches:
            return None

        # A API devolve as vendas mais recentes primeiro.
        latest = matches[0]
        return PayhipSale(
            sale_id=as_reference(latest.get("sale_id") or latest.get("id")),
            buyer_email=email_l,
            product_name=as_label(latest.get("product_name")),
            variant_name=as_label(latest.get("variant_name")),
            amount=to_decimal(latest.get("sale_price") or latest.get("amount")),
        )

    def _fetch_sales(self) -> list[dict[str, Any]]:
        url = f"{self._settings.api_base.rstrip('/')}/sales"
        try:
            with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                response = client.get(url, headers={"payhip-api-key": self._settings.api_key})
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("payhip_client: sales_request_failed url=%s error=%s", url, exc)
            raise PurchaseLookupError("Payhip sales lookup failed.") from exc

        sales = payload.get("sales") if isinstance(payload, dict) else None
        if not isinstance(sales, list):
            return []
        return [sale for sale in sales if isinstance(sale, dict)]
