from __future__ import annotations

import logging

from app.application.ports.accounts_port import AccountsPort
from app.application.ports.pending_activations_port import PendingActivationsPort
from app.domain.entities.pending_activation import PendingActivation
from app.domain.entities.subscription import status_for_period
from app.domain.entities.user import UserAccount

from .subscription_common import Clock, normalize_email, utcnow


logger = logging.getLogger(__name__)


class ApplyPendingActivationUseCase:
    """Copia uma compra pendente para a conta recem-criada com o mesmo email."""

    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        pending_port: PendingActivationsPort,
        clock: Clock = utcnow,
    ):
        self._accounts_port = accounts_port
        self._pending_port = pending_port
        self._clock = clock

    def execute(self, *, user: UserAccount) -> PendingActivation | None:
        email = normalize_email(user.email)
        pending = self._pending_port.find_unresolved_pending(email=email)
        if pending is None:
            return None

        now = self._clock()
        status = status_for_period(pending.period_end, now=now)
        self._accounts_port.update_subscription(
            user_id=user.id,
            tier=pending.tier,
            status=status,
            period_start=pending.period_start,
            period_end=pending.period_end,
            sale_ref=pending.external_sale_reference,
            now=now,
        )
        self._pending_port.mark_pending_activated(pending_id=pending.id, now=now)
        logger.info(
            "apply_pending_activation: applied user_id=%s pending_id=%s tier=%s status=%s",
            user.id,
            pending.id,
            pending.tier,
            status,
        )
        return pending
