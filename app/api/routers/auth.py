from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_register_user_use_case
from app.api.schemas.auth import AccountResponse, SignupRequest, SignupResponse
from app.application.dto.auth import RegisterUserInput
from app.application.use_cases.register_user import RegisterUserUseCase
from app.domain.exceptions import EmailAlreadyExistsError, SubscriptionStoreUnavailableError


router = APIRouter()


@router.post("/v1/auth/signup", response_model=SignupResponse)
def signup(
    req: SignupRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        output = use_case.execute(
            RegisterUserInput(
                name=req.name,
                email=req.email,
                password=req.password,
            )
        )
    except EmailAlreadyExistsError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SubscriptionStoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    user = output.user
    return SignupResponse(
        user=AccountResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            tier=user.tier,
            status=user.status,
            period_start=user.period_start,
            period_end=user.period_end,
        ),
        pending_applied=output.pending_applied,
    )
