from __future__ import annotations

from functools import lru_cache
import json

from fastapi import HTTPException

from app.application.use_cases.activate_pending_activation import ActivatePendingActivationUseCase
from app.application.use_cases.activate_purchase import ActivatePurchaseUseCase
from app.application.use_cases.apply_pending_activation import ApplyPendingActivationUseCase
from app.application.use_cases.delete_pending_activation import DeletePendingActivationUseCase
from app.application.use_cases.expire_subscriptions import ExpireSubscriptionsUseCase
from app.application.use_cases.list_pending_activations import ListPendingActivationsUseCase
from app.application.use_cases.process_payment_webhook import ProcessPaymentWebhookUseCase
from app.application.use_cases.register_user import RegisterUserUseCase
from app.application.use_cases.verify_purchase import VerifyPurchaseUseCase
from app.domain.entities.tier_rule import TierRule, build_tier_rules
from app.domain.exceptions import InvalidTierError
from app.infrastructure.db.engine import get_engine
from app.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from app.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_accounts_repository() -> SqlAccountsRepository:
    return SqlAccountsRepository(_get_db_engine())


@lru_cache(maxsize=4)
def _build_tier_rules(raw_rules: str) -> tuple[TierRule, ...]:
    return build_tier_rules(json.loads(raw_rules))


def get_tier_rules() -> tuple[TierRule, ...]:
    settings = get_settings()
    try:
        return _build_tier_rules(json.dumps(settings.tier_rules or [], sort_keys=True))
    except (InvalidTierError, ValueError, TypeError) as exc:
        raise HTTPException(status_code=500, detail=f"TIER_RULES is invalid: {exc}") from exc


@lru_cache(maxsize=1)
def _get_password_hasher() -> "PasslibPasswordHasher":
    from app.infrastructure.security.password_hasher import PasslibPasswordHasher

    return PasslibPasswordHasher()


def _get_lemonsqueezy_parser() -> "LemonSqueezyWebhookParser":
    from app.infrastructure.clients.lemonsqueezy_webhook import LemonSqueezyWebhookParser

    settings = get_settings()
    if not settings.lemonsqueezy_webhook_secret:
        raise HTTPException(status_code=500, detail="LEMONSQUEEZY_WEBHOOK_SECRET is required.")
    return LemonSqueezyWebhookParser(webhook_secret=settings.lemonsqueezy_webhook_secret)


def _get_payhip_parser() -> "PayhipWebhookParser":
    from app.infrastructure.clients.payhip_webhook import PayhipWebhookParser

    settings = get_settings()
    if not settings.payhip_api_key:
        raise HTTPException(status_code=500, detail="PAYHIP_API_KEY is required.")
    return PayhipWebhookParser(api_key=settings.payhip_api_key)


def _get_stripe_client() -> "StripeClient":
    from app.infrastructure.clients.stripe_client import StripeClient

    settings = get_settings()
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY is required.")
    if not settings.stripe_webhook_secret:
        raise HTTPException(status_code=500, detail="STRIPE_WEBHOOK_SECRET is required.")
    return StripeClient(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
    )


def _get_payhip_sales_client() -> "PayhipSalesClient | None":
    from app.infrastructure.clients.payhip_client import PayhipClientSettings, PayhipSalesClient

    settings = get_settings()
    if not settings.payhip_api_key:
        return None
    return PayhipSalesClient(
        PayhipClientSettings(
            api_base=settings.payhip_api_base,
            api_key=settings.payhip_api_key,
            timeout_seconds=settings.payhip_timeout_seconds,
        )
    )


def get_activate_purchase_use_case() -> ActivatePurchaseUseCase:
    repository = _get_accounts_repository()
    return ActivatePurchaseUseCase(
        accounts_port=repository,
        pending_port=repository,
        tier_rules=get_tier_rules(),
    )


def get_lemonsqueezy_webhook_use_case() -> ProcessPaymentWebhookUseCase:
    return ProcessPaymentWebhookUseCase(
        webhook_port=_get_lemonsqueezy_parser(),
        activate_purchase_use_case=get_activate_purchase_use_case(),
    )


def get_payhip_webhook_use_case() -> ProcessPaymentWebhookUseCase:
    return ProcessPaymentWebhookUseCase(
        webhook_port=_get_payhip_parser(),
        activate_purchase_use_case=get_activate_purchase_use_case(),
    )


def get_stripe_webhook_use_case() -> ProcessPaymentWebhookUseCase:
    return ProcessPaymentWebhookUseCase(
        webhook_port=_get_stripe_client(),
        activate_purchase_use_case=get_activate_purchase_use_case(),
    )


def get_register_user_use_case() -> RegisterUserUseCase:
    repository = _get_accounts_repository()
    return RegisterUserUseCase(
        accounts_port=repository,
        password_hasher=_get_password_hasher(),
        apply_pending_use_case=ApplyPendingActivationUseCase(
            accounts_port=repository,
            pending_port=repository,
        ),
    )


def get_verify_purchase_use_case() -> VerifyPurchaseUseCase:
    return VerifyPurchaseUseCase(
        pending_port=_get_accounts_repository(),
        payhip_port=_get_payhip_sales_client(),
        tier_rules=get_tier_rules(),
    )


def get_expire_subscriptions_use_case() -> ExpireSubscriptionsUseCase:
    return ExpireSubscriptionsUseCase(accounts_port=_get_accounts_repository())


def get_list_pending_activations_use_case() -> ListPendingActivationsUseCase:
    return ListPendingActivationsUseCase(pending_port=_get_accounts_repository())


def get_activate_pending_activation_use_case() -> ActivatePendingActivationUseCase:
    repository = _get_accounts_repository()
    return ActivatePendingActivationUseCase(
        accounts_port=repository,
        pending_port=repository,
        tier_rules=get_tier_rules(),
    )


def get_delete_pending_activation_use_case() -> DeletePendingActivationUseCase:
    return DeletePendingActivationUseCase(pending_port=_get_accounts_repository())
