from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from app.application.use_cases.activate_purchase import ActivatePurchaseUseCase
from app.domain.entities.purchase_event import PurchaseEvent
from app.domain.entities.tier_rule import build_tier_rules
from app.domain.exceptions import MalformedPurchaseEventError, SubscriptionStoreUnavailableError

from tests.fakes import NOW, FakeSubscriptionStore, FixedClock


def _event(**overrides) -> PurchaseEvent:
    fields = {
        "provider": "payhip",
        "email": "a@x.com",
        "amount": Decimal("99.99"),
        "variant_label": "Pro Plan",
        "product_label": "",
        "sale_reference": "sale-1",
        "payment_status": "paid",
        "raw_payload": {"sale_id": "sale-1"},
    }
    fields.update(overrides)
    return PurchaseEvent(**fields)


def _use_case(store: FakeSubscriptionStore, clock: FixedClock | None = None) -> ActivatePurchaseUseCase:
    return ActivatePurchaseUseCase(
        accounts_port=store,
        pending_port=store,
        tier_rules=build_tier_rules(None),
        clock=clock or FixedClock(),
    )


def test_unregistered_buyer_gets_pending_activation():
    store = FakeSubscriptionStore()

    result = _use_case(store).execute(_event())

    assert result.status == "pending"
    assert result.tier == "pro"
    assert result.email == "a@x.com"
    pending = store.find_unresolved_pending(email="a@x.com")
    assert pending is not None
    assert pending.tier == "pro"
    assert pending.activated is False
    assert pending.period_start == NOW
    assert pending.period_end == NOW + timedelta(days=180)
    assert pending.raw_payload == {"sale_id": "sale-1"}


def test_email_is_normalized_before_lookup_and_write():
    store = FakeSubscriptionStore()
    user = store.add_user(email="buyer@example.com")

    result = _use_case(store).execute(_event(email="  Buyer@Example.COM "))

    assert result.status == "activated"
    assert result.email == "buyer@example.com"
    assert store.users[user.id].tier == "pro"


def test_registered_buyer_is_activated_and_previous_subscription_overwritten():
    store = FakeSubscriptionStore()
    user = store.add_user(
        email="a@x.com",
        tier="elite",
        status="active",
        period_start=NOW - timedelta(days=10),
        period_end=NOW + timedelta(days=355),
        external_sale_reference="old-sale",
    )

    result = _use_case(store).execute(_event(variant_label="Basic", sale_reference="new-sale"))

    updated = store.users[user.id]
    assert result.status == "activated"
    assert updated.tier == "basic"
    assert updated.status == "active"
    assert updated.period_start == NOW
    assert updated.period_end == NOW + timedelta(days=30)
    assert updated.external_sale_reference == "new-sale"
    assert store.pending == {}


def test_same_event_twice_for_unregistered_email_keeps_single_pending_with_latest_fields():
    store = FakeSubscriptionStore()
    clock = FixedClock()
    use_case = _use_case(store, clock)

    use_case.execute(_event())
    clock.now = NOW + timedelta(minutes=5)
    use_case.execute(_event())

    assert len(store.pending) == 1
    pending = next(iter(store.pending.values()))
    assert pending.period_start == NOW + timedelta(minutes=5)
    assert pending.period_end == NOW + timedelta(minutes=5, days=180)
    assert pending.activated is False


def test_second_purchase_for_unregistered_email_replaces_pending():
    store = FakeSubscriptionStore()
    use_case = _use_case(store)

    use_case.execute(_event(variant_label="Basic", sale_reference="sale-1"))
    use_case.execute(_event(variant_label="Elite", sale_reference="sale-2"))

    assert len(store.pending) == 1
    pending = store.find_unresolved_pending(email="a@x.com")
    assert pending.tier == "elite"
    assert pending.external_sale_reference == "sale-2"


def test_same_event_twice_for_registered_user_leaves_subscription_unchanged():
    store = FakeSubscriptionStore()
    clock = FixedClock()
    user = store.add_user(email="a@x.com")
    use_case = _use_case(store, clock)

    use_case.execute(_event())
    after_first = store.users[user.id]
    clock.now = NOW + timedelta(hours=1)
    result = use_case.execute(_event())
    after_second = store.users[user.id]

    assert result.status == "activated"
    assert result.reason == "duplicate"
    assert (after_second.tier, after_second.status, after_second.period_start, after_second.period_end) == (
        after_first.tier,
        after_first.status,
        after_first.period_start,
        after_first.period_end,
    )
    assert store.writes.count("update_subscription") == 1


def test_redelivery_after_period_end_is_not_reported_with_past_end_date():
    store = FakeSubscriptionStore()
    clock = FixedClock()
    user = store.add_user(
        email="a@x.com",
        tier="pro",
        status="active",
        period_start=NOW - timedelta(days=181),
        period_end=NOW - timedelta(days=1),
        external_sale_reference="sale-1",
    )

    result = _use_case(store, clock).execute(_event())

    assert result.status == "activated"
    assert result.reason is None
    assert result.period_end == NOW + timedelta(days=180)
    assert store.users[user.id].period_end > NOW
    assert store.writes == ["update_subscription"]


@pytest.mark.parametrize("status", ["refunded", "pending", "cancelled", ""])
def test_non_paid_events_never_write(status):
    store = FakeSubscriptionStore()
    user = store.add_user(email="a@x.com")

    result = _use_case(store).execute(_event(payment_status=status))

    assert result.status == "skipped"
    assert result.tier is None
    assert store.writes == []
    assert store.users[user.id].status == "none"
    assert store.pending == {}


@pytest.mark.parametrize("email", ["", "   "])
def test_missing_email_is_rejected(email):
    store = FakeSubscriptionStore()

    with pytest.raises(MalformedPurchaseEventError):
        _use_case(store).execute(_event(email=email))

    assert store.writes == []


def test_fully_discounted_purchase_without_label_resolves_to_basic():
    store = FakeSubscriptionStore()

    result = _use_case(store).execute(
        _event(email="b@x.com", amount=Decimal("0"), variant_label="", product_label="")
    )

    assert result.status == "pending"
    assert result.tier == "basic"
    assert result.period_end == NOW + timedelta(days=30)


def test_store_failure_surfaces_as_retryable_error():
    store = FakeSubscriptionStore()
    store.fail_operations.add("upsert_pending_activation")

    with pytest.raises(SubscriptionStoreUnavailableError):
        _use_case(store).execute(_event())

    store.fail_operations.clear()
    result = _use_case(store).execute(_event())
    assert result.status == "pending"
