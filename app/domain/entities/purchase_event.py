from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Literal


PaymentProvider = Literal["lemonsqueezy", "payhip", "stripe"]


@dataclass(frozen=True)
class PurchaseEvent:
    """Compra normalizada, independente do provedor.

    ``amount`` sempre em unidades monetarias inteiras (ex.: 99.99), nunca em
    centavos; cada adaptador converte antes de montar o evento.
    """

    provider: PaymentProvider
    email: str
    amount: Decimal | None
    variant_label: str
    product_label: str
    sale_reference: str | None
    payment_status: str
    raw_payload: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"
