"""
Models module initialization
"""

from .author import Author
from .listing import Listing
from .review import Review, MUTABLE_REVIEW_FIELDS
from .user import User

__all__ = [
    "Author",
    "Listing",
    "Review",
    "MUTABLE_REVIEW_FIELDS",
    "User",
]
