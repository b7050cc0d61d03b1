"""Bearer token issuing and verification (JWT)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from jose import JWTError, jwt

from .config import Settings
from .errors import UnauthenticatedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subject:
    """Identity carried by a verified token."""

    external_id: str


class IdentityVerifier:
    """
    Issues and verifies signed bearer tokens.

    Every way a token can be wrong (missing, malformed, bad signature,
    expired, no subject) ends in the same UnauthenticatedError so callers
    learn nothing about which check failed.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 86400) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityVerifier":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.token_ttl_seconds)

    @property
    def expires_in(self) -> int:
        return self._ttl

    def issue(self, external_id: str, *, now: int | None = None) -> str:
        issued_at = int(time.time()) if now is None else now
        claims = {"sub": external_id, "iat": issued_at, "exp": issued_at + self._ttl}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> Subject:
        if not token:
            raise UnauthenticatedError()
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            logger.debug("Rejected bearer token: %s", exc)
            raise UnauthenticatedError() from None
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise UnauthenticatedError()
        return Subject(external_id=subject)
