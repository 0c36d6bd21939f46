"""
Dependencies module initialization
"""

from .auth import get_current_user, get_authenticator, require_admin
from .services import (
    get_author_service,
    get_listing_service,
    get_repair_service,
    get_review_service,
)

__all__ = [
    "get_current_user",
    "get_authenticator",
    "require_admin",
    "get_author_service",
    "get_listing_service",
    "get_repair_service",
    "get_review_service",
]
