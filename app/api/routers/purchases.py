from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_verify_purchase_use_case
from app.api.schemas.purchases import VerifyPurchaseRequest, VerifyPurchaseResponse
from app.application.dto.purchases import VerifyPurchaseInput
from app.application.use_cases.verify_purchase import VerifyPurchaseUseCase
from app.domain.exceptions import PurchaseLookupError, SubscriptionStoreUnavailableError


router = APIRouter()


@router.post("/v1/purchases/verify", response_model=VerifyPurchaseResponse)
def verify_purchase(
    req: VerifyPurchaseRequest,
    use_case: VerifyPurchaseUseCase = Depends(get_verify_purchase_use_case),
):
    try:
        output = use_case.execute(VerifyPurchaseInput(email=req.email))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (PurchaseLookupError, SubscriptionStoreUnavailableError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return VerifyPurchaseResponse(
        email=output.email,
        can_signup=output.can_signup,
        source=output.source,
        tier=output.tier,
        duration_days=output.duration_days,
        period_start=output.period_start,
        period_end=output.period_end,
        sale_reference=output.sale_reference,
    )
