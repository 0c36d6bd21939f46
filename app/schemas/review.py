"""
API schemas for review endpoints
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from app.validators.review_validators import ReviewValidatorMixin


class ReviewCreate(ReviewValidatorMixin, BaseModel):
    listing_id: str
    content: str
    rating: int
    img_url: List[str] = []


class ReviewUpdate(ReviewValidatorMixin, BaseModel):
    content: Optional[str] = None
    rating: Optional[int] = None
    img_url: Optional[List[str]] = None


class ReviewResponse(BaseModel):
    id: str
    content: str
    rating: int
    author_ref: str
    target_ref: str
    img_url: List[str]
    created_at: datetime
    updated_at: Optional[datetime] = None
