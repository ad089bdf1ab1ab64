from __future__ import annotations

import logging

from app.application.dto.billing import PaymentWebhookInput, PaymentWebhookOutput
from app.application.ports.payment_webhook_port import PaymentWebhookPort

from .activate_purchase import ActivatePurchaseUseCase


logger = logging.getLogger(__name__)


class ProcessPaymentWebhookUseCase:
    def __init__(
        self,
        *,
        webhook_port: PaymentWebhookPort,
        activate_purchase_use_case: ActivatePurchaseUseCase,
    ):
        self._webhook_port = webhook_port
        self._activate_purchase_use_case = activate_purchase_use_case

    def execute(self, command: PaymentWebhookInput) -> PaymentWebhookOutput:
        notification = self._webhook_port.parse_notification(
            signature=command.signature,
            payload=command.payload,
        )
        if notification.purchase is None:
            logger.info("process_payment_webhook: ignored event_type=%s", notification.event_type)
            return PaymentWebhookOutput(event_type=notification.event_type, result=None)

        result = self._activate_purchase_use_case.execute(notification.purchase)
        return PaymentWebhookOutput(event_type=notification.event_type, result=result)
