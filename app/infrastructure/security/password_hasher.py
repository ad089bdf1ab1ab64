from __future__ import annotations

from passlib.context import CryptContext

from app.application.ports.password_hasher_port import PasswordHasherPort


DEFAULT_SCHEMES = ("argon2", "bcrypt")


class PasslibPasswordHasher(PasswordHasherPort):
    """Hash de senha para contas criadas no cadastro; argon2 quando disponivel."""

    def __init__(self, schemes: tuple[str, ...] = DEFAULT_SCHEMES):
        self._ctx = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)
