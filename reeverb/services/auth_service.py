"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from reeverb.core.errors import ConflictError, UnauthenticatedError
from reeverb.core.security import hash_password, needs_rehash, verify_password
from reeverb.core.tokens import IdentityVerifier
from reeverb.db.models import User
from reeverb.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    token: str
    expires_in: int
    user: User


class AuthService:
    """Handles registration and login; both end with a freshly issued bearer token."""

    def __init__(self, repository: SQLRepository, verifier: IdentityVerifier) -> None:
        self.repository = repository
        self.verifier = verifier

    def _issue(self, user: User) -> AuthResult:
        token = self.verifier.issue(str(user.pid))
        return AuthResult(token=token, expires_in=self.verifier.expires_in, user=user)

    # -------------------------------------- registration --------------------------------------
    def register(self, email: str, password: str, name: str | None = None) -> AuthResult:
        raw_email = (email or "").strip()
        if self.repository.get_user_by_email(raw_email):
            raise ConflictError("email already registered")
        user = self.repository.create_user(raw_email, hash_password(password), name=name)
        logger.info("Registered user id=%s", user.id)
        return self._issue(user)

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> AuthResult:
        raw_email = (email or "").strip()
        user = self.repository.get_user_by_email(raw_email) if raw_email else None
        if not user or not verify_password(password, user.password_hash):
            raise UnauthenticatedError("invalid credentials")
        if needs_rehash(user.password_hash):
            self.repository.update_user_password(user.id, hash_password(password))
        return self._issue(user)
