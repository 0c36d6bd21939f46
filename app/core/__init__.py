"""
Core module initialization
"""

from .config import config
from .errors import (
    ErrorResponse,
    ErrorResponseModel,
    ValidationFailed,
    NotFound,
    Unauthorized,
    Unauthenticated,
    Conflict,
    StoreUnavailable,
)
from .logger import logger

__all__ = [
    "config",
    "ErrorResponse",
    "ErrorResponseModel",
    "ValidationFailed",
    "NotFound",
    "Unauthorized",
    "Unauthenticated",
    "Conflict",
    "StoreUnavailable",
    "logger",
]
