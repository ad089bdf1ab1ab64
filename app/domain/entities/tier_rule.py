from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from app.domain.exceptions import InvalidTierError


@dataclass(frozen=True)
class TierRule:
    tier: str
    keywords: tuple[str, ...]
    min_amount: Decimal
    duration_days: int


DEFAULT_TIER_RULES: tuple[TierRule, ...] = (
    TierRule(tier="elite", keywords=("elite",), min_amount=Decimal("150"), duration_days=365),
    TierRule(tier="pro", keywords=("pro",), min_amount=Decimal("50"), duration_days=180),
    TierRule(tier="basic", keywords=("basic", "basec"), min_amount=Decimal("0"), duration_days=30),
)


def build_tier_rules(raw_rules: Iterable[dict[str, Any]] | None) -> tuple[TierRule, ...]:
    """Monta a tabela de tiers a partir da configuracao (``TIER_RULES``).

    Sem configuracao, usa ``DEFAULT_TIER_RULES``. A tabela volta ordenada do
    tier mais caro para o mais barato, que e a ordem de precedencia usada na
    resolucao.
    """
    if not raw_rules:
        return order_tier_rules(DEFAULT_TIER_RULES)

    rules: list[TierRule] = []
    for raw in raw_rules:
        tier = str(raw.get("tier") or "").strip().lower()
        if not tier:
            raise InvalidTierError("Tier rule without tier name.")
        keywords = raw.get("keywords") or [tier]
        if isinstance(keywords, str):
            keywords = [keywords]
        duration_days = int(raw.get("duration_days", 0))
        if duration_days <= 0:
            raise InvalidTierError(f"Tier '{tier}' must have a positive duration_days.")
        rules.append(
            TierRule(
                tier=tier,
                keywords=tuple(str(keyword).strip().lower() for keyword in keywords if str(keyword).strip()),
                min_amount=Decimal(str(raw.get("min_amount", "0"))),
                duration_days=duration_days,
            )
        )
    return order_tier_rules(rules)


def order_tier_rules(rules: Iterable[TierRule]) -> tuple[TierRule, ...]:
    return tuple(sorted(rules, key=lambda rule: rule.min_amount, reverse=True))


def find_tier_rule(rules: Iterable[TierRule], tier: str) -> TierRule:
    for rule in rules:
        if rule.tier == tier:
            return rule
    raise InvalidTierError(f"Unknown tier '{tier}'.")
