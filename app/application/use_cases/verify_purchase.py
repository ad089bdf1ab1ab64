from __future__ import annotations

import logging
from typing import Sequence

from app.application.dto.purchases import VerifyPurchaseInput, VerifyPurchaseOutput
from app.application.ports.pending_activations_port import PendingActivationsPort
from app.application.ports.payhip_sales_port import PayhipSalesPort
from app.domain.entities.tier_rule import TierRule
from app.domain.services.subscription_period import compute_period
from app.domain.services.tier_resolver import resolve_tier

from .subscription_common import Clock, normalize_email, utcnow


logger = logging.getLogger(__name__)


class VerifyPurchaseUseCase:
    """Informa se um email tem compra que libera o cadastro.

    Primeiro procura uma ativacao pendente (registrada pelo webhook); se nao
    houver, consulta as vendas do Payhip. Nada e gravado aqui: o webhook
    continua sendo a fonte da ativacao.
    """

    def __init__(
        self,
        *,
        pending_port: PendingActivationsPort,
        payhip_port: PayhipSalesPort | None,
        tier_rules: Sequence[TierRule],
        clock: Clock = utcnow,
    ):
        self._pending_port = pending_port
        self._payhip_port = payhip_port
        self._tier_rules = tier_rules
        self._clock = clock

    def execute(self, command: VerifyPurchaseInput) -> VerifyPurchaseOutput:
        email = normalize_email(command.email)
        if not email:
            raise ValueError("email is required.")

        pending = self._pending_port.find_unresolved_pending(email=email)
        if pending is not None:
            return VerifyPurchaseOutput(
                email=email,
                can_signup=True,
                source="pending",
                tier=pending.tier,
                duration_days=(pending.period_end - pending.period_start).days,
                period_start=pending.period_start,
                period_end=pending.period_end,
                sale_reference=pending.external_sale_reference,
            )

        sale = self._payhip_port.find_latest_sale(email=email) if self._payhip_port is not None else None
        if sale is None:
            logger.info("verify_purchase: not_found email=%s", email)
            return VerifyPurchaseOutput(
                email=email,
                can_signup=False,
                source=None,
                tier=None,
                duration_days=None,
                period_start=None,
                period_end=None,
                sale_reference=None,
            )

        resolution = resolve_tier(
            variant_label=sale.variant_name,
            product_label=sale.product_name,
            amount=sale.amount,
            rules=self._tier_rules,
        )
        period = compute_period(now=self._clock(), duration_days=resolution.duration_days)
        logger.info(
            "verify_purchase: payhip_sale email=%s sale_id=%s tier=%s source=%s",
            email,
            sale.sale_id,
            resolution.tier,
            resolution.source,
        )
        return VerifyPurchaseOutput(
            email=email,
            can_signup=True,
            source="payhip",
            tier=resolution.tier,
            duration_days=resolution.duration_days,
            period_start=period.start,
            period_end=period.end,
            sale_reference=sale.sale_id,
        )
