from __future__ import annotations

from fastapi import APIRouter, Request

from reeverb.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from reeverb.services.auth_service import AuthResult, AuthService
from reeverb.services.session_service import current_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_auth_service(request: Request) -> AuthService:
    svc = getattr(getattr(request.app, "state", None), "auth_service", None)
    if not svc:
        raise RuntimeError("AuthService not configured")
    return svc


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        token=result.token,
        expires_in=result.expires_in,
        user=UserResponse.from_entity(result.user),
    )


@router.post("/register", response_model=AuthResponse)
def register(body: RegisterRequest, request: Request):
    result = _get_auth_service(request).register(body.email, body.password, body.name)
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, request: Request):
    result = _get_auth_service(request).login(body.email, body.password)
    return _auth_response(result)


@router.get("/me", response_model=UserResponse)
def me(request: Request):
    return UserResponse.from_entity(current_user(request))
