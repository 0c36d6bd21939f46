"""
Correlation ID for the review write sequences.

A create or delete touches up to three collections in separate writes, so one
request produces several log lines (review_created, review_link_failed,
review_unlink_failed, ...). They all carry the same correlation ID, which lets
an orphan review or dangling reference reported by the repair pass be traced
back to the request that left it. The ID is taken from the incoming header
when a gateway already assigned one, and returned to the caller.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import config

# Read by the structured logger for every line emitted while serving a request
_request_correlation_id: ContextVar[Optional[str]] = ContextVar("request_correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the request being served, None outside a request"""
    return _request_correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current task context"""
    _request_correlation_id.set(correlation_id)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds one correlation ID per request and echoes it in the response header"""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(config.correlation_id_header) or str(uuid.uuid4())

        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[config.correlation_id_header] = correlation_id
        return response
