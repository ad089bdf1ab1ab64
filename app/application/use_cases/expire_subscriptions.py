from __future__ import annotations

import logging

from app.application.dto.admin import ExpireSubscriptionsOutput
from app.application.ports.accounts_port import AccountsPort

from .subscription_common import Clock, utcnow


logger = logging.getLogger(__name__)


class ExpireSubscriptionsUseCase:
    def __init__(self, *, accounts_port: AccountsPort, clock: Clock = utcnow):
        self._accounts_port = accounts_port
        self._clock = clock

    def execute(self) -> ExpireSubscriptionsOutput:
        now = self._clock()
        expired = self._accounts_port.expire_subscriptions(now=now)
        for user in expired:
            logger.info(
                "expire_subscriptions: expired user_id=%s email=%s tier=%s period_end=%s",
                user.id,
                user.email,
                user.tier,
                user.period_end.isoformat() if user.period_end else None,
            )
        logger.info("expire_subscriptions: done expired_count=%s", len(expired))
        return ExpireSubscriptionsOutput(expired_count=len(expired), expired_users=expired, ran_at=now)
