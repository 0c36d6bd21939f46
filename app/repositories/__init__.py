"""
Repositories module initialization
"""

from .base import DocumentRepository, REVIEW_REFS
from .author import AuthorRepository
from .listing import ListingRepository
from .review import ReviewRepository

__all__ = [
    "DocumentRepository",
    "REVIEW_REFS",
    "AuthorRepository",
    "ListingRepository",
    "ReviewRepository",
]
