"""
Configuration helpers for the Reeverb backend.

`load_settings()` is called once by the app factory; the resulting Settings
value is handed to everything that needs it instead of each module reading
os.environ on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping
import os

DEV_JWT_SECRET = "dev-secret-change-me"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str = "dev"
    database_url: str = "sqlite:///./reeverb.db"
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 86400
    cors_origins: tuple[str, ...] = ()
    log_level: str = "INFO"
    create_tables_on_start: bool = True

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read the environment (or the given mapping) and build a Settings instance."""
    env = os.environ if environ is None else environ

    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (env.get("APP_ENV") or "dev").strip().lower()
    secret = (env.get("JWT_SECRET") or "").strip()
    if not secret:
        if app_env == "prod":
            raise RuntimeError("JWT_SECRET must be configured when APP_ENV=prod.")
        secret = DEV_JWT_SECRET
    origins = tuple(
        origin.strip().rstrip("/")
        for origin in (env.get("CORS_ORIGINS") or "").split(",")
        if origin.strip()
    )

    return Settings(
        app_env=app_env,
        database_url=(env.get("DATABASE_URL") or "sqlite:///./reeverb.db").strip(),
        jwt_secret=secret,
        jwt_algorithm=(env.get("JWT_ALGORITHM") or "HS256").strip(),
        token_ttl_seconds=max(60, _int(env.get("TOKEN_TTL_SECONDS"), 86400)),
        cors_origins=origins,
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
        create_tables_on_start=_bool(env.get("CREATE_TABLES_ON_START"), True),
    )
