from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import (
    get_activate_pending_activation_use_case,
    get_delete_pending_activation_use_case,
    get_list_pending_activations_use_case,
)
from app.api.schemas.admin import (
    ActivatePendingRequest,
    ActivatePendingResponse,
    DeletePendingResponse,
    PendingActivationResponse,
)
from app.application.dto.admin import ActivatePendingInput
from app.application.use_cases.activate_pending_activation import ActivatePendingActivationUseCase
from app.application.use_cases.delete_pending_activation import DeletePendingActivationUseCase
from app.application.use_cases.list_pending_activations import ListPendingActivationsUseCase
from app.core.auth import require_admin_token
from app.domain.exceptions import (
    AccountNotFoundError,
    InvalidTierError,
    PendingActivationNotFoundError,
    SubscriptionStoreUnavailableError,
)


router = APIRouter(prefix="/v1/admin", dependencies=[Depends(require_admin_token)])


@router.get("/pending-activations", response_model=list[PendingActivationResponse])
def list_pending_activations(
    only_unresolved: bool = True,
    use_case: ListPendingActivationsUseCase = Depends(get_list_pending_activations_use_case),
):
    try:
        rows = use_case.execute(only_unresolved=only_unresolved)
    except SubscriptionStoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return [
        PendingActivationResponse(
            id=row.id,
            email=row.email,
            tier=row.tier,
            period_start=row.period_start,
            period_end=row.period_end,
            external_sale_reference=row.external_sale_reference,
            activated=row.activated,
            activated_at=row.activated_at,
            created_at=row.created_at,
        )
        for row in rows
    ]


@router.post("/pending-activations/{pending_id}/activate", response_model=ActivatePendingResponse)
def activate_pending_activation(
    pending_id: UUID,
    req: ActivatePendingRequest | None = None,
    use_case: ActivatePendingActivationUseCase = Depends(get_activate_pending_activation_use_case),
):
    try:
        output = use_case.execute(
            ActivatePendingInput(
                pending_id=str(pending_id),
                tier=req.tier if req is not None else None,
            )
        )
    except (PendingActivationNotFoundError, AccountNotFoundError) as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidTierError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SubscriptionStoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return ActivatePendingResponse(
        pending_id=output.pending_id,
        user_id=output.user_id,
        email=output.email,
        tier=output.tier,
        period_start=output.period_start,
        period_end=output.period_end,
    )


@router.delete("/pending-activations/{pending_id}", response_model=DeletePendingResponse)
def delete_pending_activation(
    pending_id: UUID,
    use_case: DeletePendingActivationUseCase = Depends(get_delete_pending_activation_use_case),
):
    try:
        use_case.execute(pending_id=str(pending_id))
    except PendingActivationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SubscriptionStoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return DeletePendingResponse(ok=True)
