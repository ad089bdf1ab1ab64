from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from app.api.deps import (
    get_lemonsqueezy_webhook_use_case,
    get_payhip_webhook_use_case,
    get_stripe_webhook_use_case,
)
from app.api.schemas.webhooks import WebhookReadyResponse, WebhookResultResponse
from app.application.dto.billing import PaymentWebhookInput, PaymentWebhookOutput
from app.application.use_cases.process_payment_webhook import ProcessPaymentWebhookUseCase
from app.domain.exceptions import (
    MalformedPurchaseEventError,
    SubscriptionStoreUnavailableError,
    WebhookSignatureError,
)


logger = logging.getLogger(__name__)

router = APIRouter()


def _handle(
    use_case: ProcessPaymentWebhookUseCase,
    *,
    provider: str,
    signature: str | None,
    payload: bytes,
) -> WebhookResultResponse:
    try:
        output = use_case.execute(PaymentWebhookInput(signature=signature, payload=payload))
    except WebhookSignatureError as exc:
        logger.warning("webhooks: invalid_signature provider=%s error=%s", provider, exc)
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except MalformedPurchaseEventError as exc:
        logger.warning("webhooks: malformed_event provider=%s error=%s", provider, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SubscriptionStoreUnavailableError as exc:
        logger.error("webhooks: store_unavailable provider=%s error=%s", provider, exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return _to_response(output)


def _to_response(output: PaymentWebhookOutput) -> WebhookResultResponse:
    result = output.result
    if result is None:
        return WebhookResultResponse(event_type=output.event_type, status="ignored")
    return WebhookResultResponse(
        event_type=output.event_type,
        status=result.status,
        tier=result.tier,
        email=result.email,
        period_end=result.period_end,
        reason=result.reason,
    )


@router.post("/v1/webhooks/lemonsqueezy", response_model=WebhookResultResponse)
async def lemonsqueezy_webhook(
    request: Request,
    x_signature: str | None = Header(default=None, alias="X-Signature"),
    use_case: ProcessPaymentWebhookUseCase = Depends(get_lemonsqueezy_webhook_use_case),
):
    payload = await request.body()
    return _handle(use_case, provider="lemonsqueezy", signature=x_signature, payload=payload)


@router.get("/v1/webhooks/lemonsqueezy", response_model=WebhookReadyResponse)
def lemonsqueezy_webhook_ready():
    return WebhookReadyResponse(provider="lemonsqueezy", events=["order_created"])


@router.post("/v1/webhooks/payhip", response_model=WebhookResultResponse)
async def payhip_webhook(
    request: Request,
    use_case: ProcessPaymentWebhookUseCase = Depends(get_payhip_webhook_use_case),
):
    payload = await request.body()
    return _handle(use_case, provider="payhip", signature=None, payload=payload)


@router.post("/v1/webhooks/stripe", response_model=WebhookResultResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    use_case: ProcessPaymentWebhookUseCase = Depends(get_stripe_webhook_use_case),
):
    payload = await request.body()
    return _handle(use_case, provider="stripe", signature=stripe_signature, payload=payload)
