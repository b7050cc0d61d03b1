from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from reeverb.db.models import User


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(id=str(user.pid), email=user.email, name=user.name, avatar_url=user.avatar_url)


class AuthResponse(BaseModel):
    token: str
    expires_in: int
    user: UserResponse
