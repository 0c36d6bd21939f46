"""
Error types and FastAPI exception handlers.

Every failure the service reports is an ``ErrorResponse``; the typed
subclasses fix the HTTP status and the stable ``code`` clients switch on.
"""

import traceback
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from pydantic import BaseModel

from app.core.config import config
from app.core.logger import logger


class ErrorResponse(Exception):
    """Base exception for application errors"""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str, status_code: int = None, details: dict = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationFailed(ErrorResponse):
    """Missing, malformed or out-of-range input"""
    status_code = 422
    code = "VALIDATION_FAILED"


class NotFound(ErrorResponse):
    """A referenced listing, author or review does not exist"""
    status_code = 404
    code = "NOT_FOUND"


class Unauthorized(ErrorResponse):
    """Authenticated, but not the owner of the resource"""
    status_code = 403
    code = "UNAUTHORIZED"


class Unauthenticated(ErrorResponse):
    """Missing or invalid credential"""
    status_code = 401
    code = "UNAUTHENTICATED"


class Conflict(ErrorResponse):
    """Unique constraint violated, e.g. a taken author handle"""
    status_code = 409
    code = "CONFLICT"


class StoreUnavailable(ErrorResponse):
    """Persistence layer failure; the driver message is never exposed"""
    status_code = 503
    code = "STORE_UNAVAILABLE"


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    error: str
    code: str
    details: Optional[dict] = None


def render_error(exc: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code, "details": exc.details},
    )


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for ErrorResponse and its subclasses"""
    metadata = {
        "event": "error_response",
        "code": exc.code,
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
        **exc.details,
    }

    if config.environment == "development":
        metadata["traceback"] = traceback.format_exc()

    if exc.status_code >= 500:
        logger.error(f"Error: {exc.message}", metadata=metadata)
    else:
        logger.warning(f"Error: {exc.message}", metadata=metadata)

    return render_error(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request body/query validation errors as VALIDATION_FAILED"""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        metadata={"event": "request_validation_failed", "url": str(request.url), "errors": errors},
    )
    return render_error(ValidationFailed("Validation error", details={"errors": errors}))


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for HTTPException, including unmatched routes"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
