from __future__ import annotations

import logging
from uuid import uuid4

from app.application.dto.auth import RegisterUserInput, RegisterUserOutput
from app.application.ports.accounts_port import AccountsPort
from app.application.ports.password_hasher_port import PasswordHasherPort
from app.domain.exceptions import EmailAlreadyExistsError, SubscriptionStoreUnavailableError

from .apply_pending_activation import ApplyPendingActivationUseCase
from .subscription_common import Clock, build_account_output, normalize_email, utcnow


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        apply_pending_use_case: ApplyPendingActivationUseCase,
        clock: Clock = utcnow,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._apply_pending_use_case = apply_pending_use_case
        self._clock = clock

    def execute(self, command: RegisterUserInput) -> RegisterUserOutput:
        name = command.name.strip()
        email = normalize_email(command.email)
        password = command.password

        if not name:
            raise ValueError("name is required.")
        if not email:
            raise ValueError("email is required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters.")

        if self._accounts_port.find_user_by_email(email=email) is not None:
            raise EmailAlreadyExistsError("Email already registered.")

        user = self._accounts_port.create_user(
            user_id=str(uuid4()),
            name=name,
            email=email,
            password_hash=self._password_hasher.hash(password),
            created_at=self._clock(),
        )
        logger.info("register_user: created user_id=%s email=%s", user.id, email)

        # Falha aqui nao bloqueia o cadastro: a compra continua em pending_activations.
        pending = None
        try:
            pending = self._apply_pending_use_case.execute(user=user)
            if pending is not None:
                user = self._accounts_port.get_user_by_id(user_id=user.id) or user
        except SubscriptionStoreUnavailableError as exc:
            logger.warning(
                "register_user: pending_activation_failed user_id=%s email=%s error=%s",
                user.id,
                email,
                exc,
            )

        return RegisterUserOutput(user=build_account_output(user), pending_applied=pending is not None)
