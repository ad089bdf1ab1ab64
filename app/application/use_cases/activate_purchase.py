from __future__ import annotations

import logging
from typing import Sequence

from app.application.dto.billing import ActivationResult
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.pending_activations_port import PendingActivationsPort
from app.domain.entities.purchase_event import PurchaseEvent
from app.domain.entities.subscription import is_subscription_active
from app.domain.entities.tier_rule import TierRule
from app.domain.exceptions import MalformedPurchaseEventError
from app.domain.services.subscription_period import compute_period
from app.domain.services.tier_resolver import resolve_tier

from .subscription_common import Clock, normalize_email, utcnow


logger = logging.getLogger(__name__)


class ActivatePurchaseUseCase:
    """Reconcilia uma compra paga com a conta do comprador.

    Conta existente: a assinatura e sobrescrita (a ultima compra paga vence).
    Conta inexistente: a compra fica em ``pending_activations`` ate o cadastro.
    Todas as escritas sao upserts por chave, entao reentregas sao seguras.
    """

    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        pending_port: PendingActivationsPort,
        tier_rules: Sequence[TierRule],
        clock: Clock = utcnow,
    ):
        self._accounts_port = accounts_port
        self._pending_port = pending_port
        self._tier_rules = tier_rules
        self._clock = clock

    def execute(self, event: PurchaseEvent) -> ActivationResult:
        email = normalize_email(event.email)
        if not email:
            raise MalformedPurchaseEventError("Purchase event has no buyer email.")

        if not event.is_paid:
            logger.info(
                "activate_purchase: skipped provider=%s email=%s payment_status=%s",
                event.provider,
                email,
                event.payment_status,
            )
            return ActivationResult(status="skipped", tier=None, email=email, reason="not_paid")

        resolution = resolve_tier(
            variant_label=event.variant_label,
            product_label=event.product_label,
            amount=event.amount,
            rules=self._tier_rules,
        )
        logger.info(
            "activate_purchase: tier_resolved provider=%s email=%s tier=%s days=%s source=%s",
            event.provider,
            email,
            resolution.tier,
            resolution.duration_days,
            resolution.source,
        )

        now = self._clock()
        period = compute_period(now=now, duration_days=resolution.duration_days)

        user = self._accounts_port.find_user_by_email(email=email)
        if user is not None:
            if (
                event.sale_reference
                and user.external_sale_reference == event.sale_reference
                and is_subscription_active(user.status, user.period_end, now=now)
            ):
                logger.info(
                    "activate_purchase: duplicate_sale user_id=%s sale_ref=%s",
                    user.id,
                    event.sale_reference,
                )
                return ActivationResult(
                    status="activated",
                    tier=user.tier,
                    email=email,
                    period_start=user.period_start,
                    period_end=user.period_end,
                    reason="duplicate",
                )

            self._accounts_port.update_subscription(
                user_id=user.id,
                tier=resolution.tier,
                status="active",
                period_start=period.start,
                period_end=period.end,
                sale_ref=event.sale_reference,
                now=now,
            )
            logger.info(
                "activate_purchase: activated user_id=%s tier=%s until=%s",
                user.id,
                resolution.tier,
                period.end.isoformat(),
            )
            return ActivationResult(
                status="activated",
                tier=resolution.tier,
                email=email,
                period_start=period.start,
                period_end=period.end,
            )

        self._pending_port.upsert_pending_activation(
            email=email,
            tier=resolution.tier,
            period_start=period.start,
            period_end=period.end,
            sale_ref=event.sale_reference,
            raw_payload=event.raw_payload,
            now=now,
            activated=False,
        )
        logger.info(
            "activate_purchase: pending_saved email=%s tier=%s until=%s",
            email,
            resolution.tier,
            period.end.isoformat(),
        )
        return ActivationResult(
            status="pending",
            tier=resolution.tier,
            email=email,
            period_start=period.start,
            period_end=period.end,
        )
