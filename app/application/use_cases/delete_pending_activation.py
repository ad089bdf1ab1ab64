from __future__ import annotations

import logging

from app.application.ports.pending_activations_port import PendingActivationsPort
from app.domain.exceptions import PendingActivationNotFoundError


logger = logging.getLogger(__name__)


class DeletePendingActivationUseCase:
    def __init__(self, *, pending_port: PendingActivationsPort):
        self._pending_port = pending_port

    def execute(self, *, pending_id: str) -> None:
        if not self._pending_port.delete_pending_activation(pending_id=pending_id):
            raise PendingActivationNotFoundError("Pending activation not found.")
        logger.info("delete_pending_activation: deleted pending_id=%s", pending_id)
