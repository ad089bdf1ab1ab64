from __future__ import annotations

from typing import Protocol

from app.application.dto.purchases import PayhipSale


class PayhipSalesPort(Protocol):
    def find_latest_sale(self, *, email: str) -> PayhipSale | None:
        ...
