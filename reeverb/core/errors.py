"""
Error taxonomy shared by services and routers.

Services raise one of the ApiError subclasses; `error_response` is the only
place that turns them into HTTP responses.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Base class for errors that end a request with a known status."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(ApiError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "authentication required"


class NotFoundError(ApiError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "not found"


class ForbiddenError(ApiError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "you do not own this project"


class ConflictError(ApiError):
    status_code = 409
    code = "CONFLICT"
    default_message = "conflict"


class InternalError(ApiError):
    pass


def error_response(err: ApiError) -> JSONResponse:
    # Internal errors never carry store diagnostics to the client.
    message = InternalError.default_message if err.status_code >= 500 else err.message
    headers = {"WWW-Authenticate": "Bearer"} if err.status_code == 401 else None
    return JSONResponse(
        {"error": {"code": err.code, "message": message}},
        status_code=err.status_code,
        headers=headers,
    )
