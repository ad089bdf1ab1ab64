from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_expire_subscriptions_use_case
from app.api.schemas.admin import ExpiredUserResponse, ExpireSubscriptionsResponse
from app.application.use_cases.expire_subscriptions import ExpireSubscriptionsUseCase
from app.core.auth import require_cron_secret
from app.domain.exceptions import SubscriptionStoreUnavailableError


router = APIRouter()


@router.api_route(
    "/v1/cron/expire-subscriptions",
    methods=["GET", "POST"],
    response_model=ExpireSubscriptionsResponse,
    dependencies=[Depends(require_cron_secret)],
)
def expire_subscriptions(
    response: Response,
    use_case: ExpireSubscriptionsUseCase = Depends(get_expire_subscriptions_use_case),
):
    try:
        output = use_case.execute()
    except SubscriptionStoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    response.headers["Cache-Control"] = "no-store"
    return ExpireSubscriptionsResponse(
        expired_count=output.expired_count,
        expired_users=[
            ExpiredUserResponse(
                id=user.id,
                email=user.email,
                name=user.name,
                tier=user.tier,
                period_end=user.period_end,
            )
            for user in output.expired_users
        ],
        ran_at=output.ran_at,
    )
