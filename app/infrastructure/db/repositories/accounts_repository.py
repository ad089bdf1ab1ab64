from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
import json
import logging
from typing import Any, Iterator
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.application.ports.accounts_port import AccountsPort
from app.application.ports.pending_activations_port import PendingActivationsPort
from app.domain.exceptions import EmailAlreadyExistsError, SubscriptionStoreUnavailableError
from app.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_pending_activation,
    map_row_to_user_account,
)


logger = logging.getLogger(__name__)

USER_COLUMNS = """
    id, name, email, password_hash, subscription_tier, subscription_status,
    subscription_start_date, subscription_end_date, external_sale_reference,
    created_at, updated_at
"""

PENDING_COLUMNS = """
    id, email, subscription_tier, subscription_start_date, subscription_end_date,
    external_sale_reference, raw_payload, activated, activated_at, created_at
"""


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning("accounts_repository: store_error operation=%s error=%s", operation, exc)
        raise SubscriptionStoreUnavailableError(f"Subscription store unavailable during {operation}.") from exc


class SqlAccountsRepository(AccountsPort, PendingActivationsPort):
    def __init__(self, engine):
        self._engine = engine

    def find_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE lower(email) = :email
            LIMIT 1
        """
        with _store_errors("find_user_by_email"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"email": email.strip().lower()}).mappings().first()
        if row is None:
            return None
        return map_row_to_user_account(row)

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        with _store_errors("get_user_by_id"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user_account(row)

    def create_user(
        self,
        *,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ):
        sql = f"""
            INSERT INTO public.users (
                id, name, email, password_hash, subscription_status, created_at, updated_at
            ) VALUES (
                :id, :name, :email, :password_hash, 'none', :created_at, :created_at
            )
            RETURNING {USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "created_at": created_at,
        }
        with _store_errors("create_user"):
            try:
                with self._engine.begin() as conn:
                    row = conn.execute(text(sql), params).mappings().one()
            except IntegrityError as exc:
                logger.info("accounts_repository: duplicate_email email=%s", email)
                raise EmailAlreadyExistsError("Email already registered.") from exc
        return map_row_to_user_account(row)

    def update_subscription(
        self,
        *,
        user_id: str,
        tier: str,
        status: str,
        period_start: datetime,
        period_end: datetime,
        sale_ref: str | None,
        now: datetime,
    ) -> None:
        sql = """
            UPDATE public.users
            SET subscription_tier = :tier,
                subscription_status = :status,
                subscription_start_date = :period_start,
                subscription_end_date = :period_end,
                external_sale_reference = :sale_ref,
                updated_at = :now
            WHERE id = :user_id
        """
        params = {
            "user_id": user_id,
            "tier": tier,
            "status": status,
            "period_start": period_start,
            "period_end": period_end,
            "sale_ref": sale_ref,
            "now": now,
        }
        with _store_errors("update_subscription"), self._engine.begin() as conn:
            conn.execute(text(sql), params)

    def expire_subscriptions(self, *, now: datetime):
        sql = f"""
            UPDATE public.users
            SET subscription_status = 'expired',
                updated_at = :now
            WHERE subscription_status = 'active'
              AND subscription_end_date < :now
            RETURNING {USER_COLUMNS}
        """
        with _store_errors("expire_subscriptions"), self._engine.begin() as conn:
            rows = conn.execute(text(sql), {"now": now}).mappings().all()
        return [map_row_to_user_account(row) for row in rows]

    def upsert_pending_activation(
        self,
        *,
        email: str,
        tier: str,
        period_start: datetime,
        period_end: datetime,
        sale_ref: str | None,
        raw_payload: dict[str, Any] | None,
        now: datetime,
        activated: bool = False,
    ):
        sql = f"""
            INSERT INTO public.pending_activations (
                id, email, subscription_tier, subscription_start_date, subscription_end_date,
                external_sale_reference, raw_payload, activated, activated_at, created_at
            ) VALUES (
                :id, :email, :tier, :period_start, :period_end,
                :sale_ref, CAST(:raw_payload AS jsonb), :activated, NULL, :now
            )
            ON CONFLICT (email) DO UPDATE
            SET subscription_tier = EXCLUDED.subscription_tier,
                subscription_start_date = EXCLUDED.subscription_start_date,
                subscription_end_date = EXCLUDED.subscription_end_date,
                external_sale_reference = EXCLUDED.external_sale_reference,
                raw_payload = EXCLUDED.raw_payload,
                activated = EXCLUDED.activated,
                activated_at = NULL,
                created_at = EXCLUDED.created_at
            RETURNING {PENDING_COLUMNS}
        """
        params = {
            "id": str(uuid4()),
            "email": email,
            "tier": tier,
            "period_start": period_start,
            "period_end": period_end,
            "sale_ref": sale_ref,
            "raw_payload": json.dumps(raw_payload, default=str) if raw_payload is not None else None,
            "activated": activated,
            "now": now,
        }
        with _store_errors("upsert_pending_activation"), self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_pending_activation(row)

    def find_unresolved_pending(self, *, email: str):
        sql = f"""
            SELECT {PENDING_COLUMNS}
            FROM public.pending_activations
            WHERE lower(email) = :email
              AND activated = false
            LIMIT 1
        """
        with _store_errors("find_unresolved_pending"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"email": email.strip().lower()}).mappings().first()
        if row is None:
            return None
        return map_row_to_pending_activation(row)

    def get_pending_by_id(self, *, pending_id: str):
        sql = f"""
            SELECT {PENDING_COLUMNS}
            FROM public.pending_activations
            WHERE id = :pending_id
            LIMIT 1
        """
        with _store_errors("get_pending_by_id"), self._engine.connect() as conn:
            row = conn.execute(text(sql), {"pending_id": pending_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_pending_activation(row)

    def mark_pending_activated(self, *, pending_id: str, now: datetime) -> None:
        sql = """
            UPDATE public.pending_activations
            SET activated = true,
                activated_at = :now
            WHERE id = :pending_id
        """
        with _store_errors("mark_pending_activated"), self._engine.begin() as conn:
            conn.execute(text(sql), {"pending_id": pending_id, "now": now})

    def list_pending_activations(self, *, only_unresolved: bool):
        sql = f"""
            SELECT {PENDING_COLUMNS}
            FROM public.pending_activations
            WHERE (CAST(:only_unresolved AS boolean) = false OR activated = false)
            ORDER BY created_at DESC
        """
        with _store_errors("list_pending_activations"), self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"only_unresolved": only_unresolved}).mappings().all()
        return [map_row_to_pending_activation(row) for row in rows]

    def delete_pending_activation(self, *, pending_id: str) -> bool:
        sql = """
            DELETE FROM public.pending_activations
            WHERE id = :pending_id
            RETURNING id
        """
        with _store_errors("delete_pending_activation"), self._engine.begin() as conn:
            row = conn.execute(text(sql), {"pending_id": pending_id}).first()
        return row is not None
