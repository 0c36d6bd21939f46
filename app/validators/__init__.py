"""
Input validation rules
"""

from .common import check_object_id
from .review_validators import ReviewValidatorMixin, check_rating, check_content, check_images
from .author_validators import AuthorValidatorMixin, check_handle, check_password

__all__ = [
    "check_object_id",
    "ReviewValidatorMixin",
    "check_rating",
    "check_content",
    "check_images",
    "AuthorValidatorMixin",
    "check_handle",
    "check_password",
]
