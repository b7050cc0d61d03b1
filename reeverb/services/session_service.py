"""Bearer credential extraction and caller resolution."""
from __future__ import annotations

from fastapi import Request

from reeverb.core.errors import UnauthenticatedError
from reeverb.core.tokens import IdentityVerifier
from reeverb.db.models import User
from reeverb.services.tenant_resolver import TenantResolver

AUTH_HEADER = "authorization"
BEARER_PREFIX = "bearer "


def bearer_token(request: Request) -> str | None:
    """Return the raw token from `Authorization: Bearer <token>`, if any."""
    header = request.headers.get(AUTH_HEADER) or ""
    if header[: len(BEARER_PREFIX)].lower() != BEARER_PREFIX:
        return None
    return header[len(BEARER_PREFIX) :].strip() or None


def current_user(request: Request) -> User:
    """Authenticate the request and resolve the caller's internal user record."""
    state = getattr(request.app, "state", None)
    verifier: IdentityVerifier | None = getattr(state, "identity_verifier", None)
    resolver: TenantResolver | None = getattr(state, "tenant_resolver", None)
    if verifier is None or resolver is None:
        raise RuntimeError("identity services not configured")
    token = bearer_token(request)
    if not token:
        raise UnauthenticatedError()
    subject = verifier.verify(token)
    return resolver.resolve_caller(subject)
