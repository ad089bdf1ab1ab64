from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Sequence

from app.domain.entities.tier_rule import TierRule, order_tier_rules


ResolutionSource = Literal["variant", "product", "amount", "default"]


@dataclass(frozen=True)
class TierResolution:
    tier: str
    duration_days: int
    source: ResolutionSource


def resolve_tier(
    *,
    variant_label: str | None,
    product_label: str | None,
    amount: Decimal | None,
    rules: Sequence[TierRule],
) -> TierResolution:
    """Resolve o tier de uma compra, sempre devolvendo algum tier.

    Precedencia: palavra-chave no nome da variante, palavra-chave no nome do
    produto, faixa de valor pago e, por fim, o tier mais barato (valor ausente,
    zero, negativo ou nao finito). As regras sao
    avaliadas do tier mais caro para o mais barato para que "pro" nao capture
    um rotulo como "Elite Pro Pack".
    """
    if not rules:
        raise ValueError("rules must not be empty.")
    ordered = order_tier_rules(rules)

    rule = _match_label(variant_label, ordered)
    if rule is not None:
        return _resolution(rule, "variant")

    rule = _match_label(product_label, ordered)
    if rule is not None:
        return _resolution(rule, "product")

    fallback = ordered[-1]
    if amount is None or not amount.is_finite() or amount <= 0:
        return _resolution(fallback, "default")

    for rule in ordered:
        if amount >= rule.min_amount:
            return _resolution(rule, "amount")
    return _resolution(fallback, "default")


def _match_label(label: str | None, ordered: Sequence[TierRule]) -> TierRule | None:
    normalized = (label or "").strip().lower()
    if not normalized:
        return None
    for rule in ordered:
        if any(keyword and keyword in normalized for keyword in rule.keywords):
            return rule
    return None


def _resolution(rule: TierRule, source: ResolutionSource) -> TierResolution:
    return TierResolution(tier=rule.tier, duration_days=rule.duration_days, source=source)
