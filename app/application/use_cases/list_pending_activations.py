from __future__ import annotations

from app.application.ports.pending_activations_port import PendingActivationsPort
from app.domain.entities.pending_activation import PendingActivation


class ListPendingActivationsUseCase:
    def __init__(self, *, pending_port: PendingActivationsPort):
        self._pending_port = pending_port

    def execute(self, *, only_unresolved: bool) -> list[PendingActivation]:
        return self._pending_port.list_pending_activations(only_unresolved=only_unresolved)
