from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str, default=None):
    value = _env(name)
    if not value:
        return default
    return json.loads(value)


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    lemonsqueezy_webhook_secret: str
    payhip_api_key: str
    payhip_api_base: str
    payhip_timeout_seconds: float
    stripe_secret_key: str
    stripe_webhook_secret: str
    cron_secret: str
    admin_api_token: str
    tier_rules: list
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        lemonsqueezy_webhook_secret=_env("LEMONSQUEEZY_WEBHOOK_SECRET", ""),
        payhip_api_key=_env("PAYHIP_API_KEY", ""),
        payhip_api_base=_env("PAYHIP_API_BASE", "https://payhip.com/api/v1"),
        payhip_timeout_seconds=float(_env("PAYHIP_TIMEOUT_SECONDS", "10")),
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        stripe_webhook_secret=_env("STRIPE_WEBHOOK_SECRET", ""),
        cron_secret=_env("CRON_SECRET", ""),
        admin_api_token=_env("ADMIN_API_TOKEN", ""),
        tier_rules=_json("TIER_RULES", []),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
