"""
Error taxonomy and the FastAPI handlers that turn errors into the
``{success, message, error}`` envelope.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a specific HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class ConflictError(AppError):
    # Invalid state transitions are reported as bad requests, not 409.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid state transition"


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class UnauthorizedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


def error_response(status_code: int, message: str, error: Optional[str] = None, **extra) -> JSONResponse:
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    content.update(extra)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content), headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    request_id = getattr(request.state, "request_id", "N/A")
    logger.info(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={"request_id": request_id}
    )
    return error_response(exc.status_code, exc.message, exc.error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, detail, detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    error_text = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", error_text, errors=errors)


async def general_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", "N/A")
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"request_id": request_id}
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))
