from __future__ import annotations

import logging
from typing import Sequence

from app.application.dto.admin import ActivatePendingInput, ActivatePendingOutput
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.pending_activations_port import PendingActivationsPort
from app.domain.entities.tier_rule import TierRule, find_tier_rule
from app.domain.exceptions import AccountNotFoundError, PendingActivationNotFoundError
from app.domain.services.subscription_period import compute_period

from .subscription_common import Clock, utcnow


logger = logging.getLogger(__name__)


class ActivatePendingActivationUseCase:
    """Ativacao manual pelo operador: aplica a compra pendente a conta ja cadastrada."""

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

    def execute(self, command: ActivatePendingInput) -> ActivatePendingOutput:
        pending = self._pending_port.get_pending_by_id(pending_id=command.pending_id)
        if pending is None:
            raise PendingActivationNotFoundError("Pending activation not found.")

        user = self._accounts_port.find_user_by_email(email=pending.email)
        if user is None:
            raise AccountNotFoundError("No account registered for this pending activation email.")

        tier = (command.tier or pending.tier).strip().lower()
        rule = find_tier_rule(self._tier_rules, tier)
        now = self._clock()
        period = compute_period(now=now, duration_days=rule.duration_days)

        self._accounts_port.update_subscription(
            user_id=user.id,
            tier=rule.tier,
            status="active",
            period_start=period.start,
            period_end=period.end,
            sale_ref=pending.external_sale_reference,
            now=now,
        )
        self._pending_port.mark_pending_activated(pending_id=pending.id, now=now)
        logger.info(
            "activate_pending_activation: activated pending_id=%s user_id=%s tier=%s",
            pending.id,
            user.id,
            rule.tier,
        )
        return ActivatePendingOutput(
            pending_id=pending.id,
            user_id=user.id,
            email=user.email,
            tier=rule.tier,
            period_start=period.start,
            period_end=period.end,
        )
