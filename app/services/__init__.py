"""
Services module initialization
"""

from .access_guard import authorize, require_owner, require_authenticated
from .authenticator import Authenticator, authenticator
from .author import AuthorService
from .listing import ListingService
from .rating import compute_average
from .repair import ConsistencyRepairService
from .review import ReviewService

__all__ = [
    "authorize",
    "require_owner",
    "require_authenticated",
    "Authenticator",
    "authenticator",
    "AuthorService",
    "ListingService",
    "compute_average",
    "ConsistencyRepairService",
    "ReviewService",
]
