"""
Review field rules: the rating bound is an integer between
``config.rating_min`` and ``config.rating_max`` inclusive (1..5).
"""

from typing import List, Optional

from pydantic import field_validator

from app.core.config import config
from app.core.errors import ValidationFailed

MAX_CONTENT_LENGTH = 5000


def rating_in_bounds(rating) -> bool:
    # bool is an int subclass but never a rating
    return (
        isinstance(rating, int)
        and not isinstance(rating, bool)
        and config.rating_min <= rating <= config.rating_max
    )


def check_rating(rating) -> int:
    if not rating_in_bounds(rating):
        raise ValidationFailed(
            f"Rating must be an integer between {config.rating_min} and {config.rating_max}",
            details={"field": "rating"},
        )
    return rating


def check_content(content) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationFailed("Review content is required", details={"field": "content"})
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValidationFailed(
            f"Review content can be up to {MAX_CONTENT_LENGTH} characters",
            details={"field": "content"},
        )
    return content


def check_images(images: Optional[List[str]]) -> List[str]:
    if images is None:
        return []
    if not isinstance(images, list) or not all(isinstance(i, str) and i for i in images):
        raise ValidationFailed("Images must be a list of non-empty strings", details={"field": "img_url"})
    return images


class ReviewValidatorMixin:
    @field_validator("rating", check_fields=False)
    @classmethod
    def rating_valid(cls, v):
        if v is not None and not rating_in_bounds(v):
            raise ValueError(f"Rating must be between {config.rating_min} and {config.rating_max}")
        return v

    @field_validator("content", check_fields=False)
    @classmethod
    def content_valid(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError("Review content cannot be blank")
            if len(v) > MAX_CONTENT_LENGTH:
                raise ValueError(f"Review content can be up to {MAX_CONTENT_LENGTH} characters")
        return v
