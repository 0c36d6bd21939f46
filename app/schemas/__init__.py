"""
API schemas
"""

from .author import (
    AuthorRegister, AuthorLogin, AuthorUpdate, AuthorResponse, TokenResponse, RegistrationResponse,
)
from .listing import ListingCreate, ListingResponse, ListingPage
from .review import ReviewCreate, ReviewUpdate, ReviewResponse
from .repair import RepairReport, DanglingReference, OrphanReview

__all__ = [
    "AuthorRegister",
    "AuthorLogin",
    "AuthorUpdate",
    "AuthorResponse",
    "TokenResponse",
    "RegistrationResponse",
    "ListingCreate",
    "ListingResponse",
    "ListingPage",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "RepairReport",
    "DanglingReference",
    "OrphanReview",
]
