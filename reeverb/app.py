import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from reeverb import __version__
from reeverb.core.config import Settings, load_settings
from reeverb.core.errors import ApiError, InternalError, error_response
from reeverb.core.logging_setup import configure_logging
from reeverb.core.tokens import IdentityVerifier
from reeverb.db.session import Database
from reeverb.repositories.sql_repository import SQLRepository
from reeverb.routers import auth as auth_router
from reeverb.routers import projects as projects_router
from reeverb.routers import tags as tags_router
from reeverb.routers import testimonials as testimonials_router
from reeverb.services.auth_service import AuthService
from reeverb.services.ownership import OwnershipGuard
from reeverb.services.project_service import ProjectService
from reeverb.services.tag_reconciler import TagReconciler
from reeverb.services.tag_service import TagService
from reeverb.services.tenant_resolver import TenantResolver
from reeverb.services.testimonial_service import TestimonialService
from reeverb.services.uniqueness import UniquenessGuard

API_PREFIX = "/api/v1"

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, no sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One log line per request: method, path, status and elapsed time."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


async def _api_error_handler(request: Request, exc: ApiError):
    return error_response(exc)


async def _database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
    return error_response(InternalError())


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(InternalError())


def _wire_services(app: FastAPI, settings: Settings, database: Database) -> None:
    repository = SQLRepository(database)
    verifier = IdentityVerifier.from_settings(settings)
    resolver = TenantResolver(repository)
    guard = OwnershipGuard(repository, resolver)
    uniqueness = UniquenessGuard(repository)

    app.state.settings = settings
    app.state.database = database
    app.state.identity_verifier = verifier
    app.state.tenant_resolver = resolver
    app.state.auth_service = AuthService(repository, verifier)
    app.state.project_service = ProjectService(repository, guard, uniqueness)
    app.state.testimonial_service = TestimonialService(repository, guard)
    app.state.tag_service = TagService(repository, guard, uniqueness, TagReconciler(repository))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API. Compatible with `uvicorn --factory reeverb.app:create_app`."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    database = Database.from_settings(settings)
    if settings.create_tables_on_start:
        database.create_all()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title="Reeverb API", version=__version__, lifespan=lifespan)
    _wire_services(app, settings, database)

    allowed_cors = set(settings.cors_origins)
    if not settings.is_prod:
        allowed_cors.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:8080",
                "http://127.0.0.1:8080",
            }
        )
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.is_prod)
    app.add_middleware(RequestLogMiddleware)

    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok", "version": __version__}

    app.include_router(auth_router.router, prefix=API_PREFIX)
    app.include_router(projects_router.router, prefix=API_PREFIX)
    app.include_router(testimonials_router.router, prefix=API_PREFIX)
    app.include_router(tags_router.router, prefix=API_PREFIX)

    logger.info("Reeverb API ready (env=%s)", settings.app_env)
    return app
