"""
Review document
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.base import Document, utc_now

# Fields an edit may change; everything else is fixed at creation
MUTABLE_REVIEW_FIELDS = ("content", "rating", "img_url")


class Review(Document):
    content: str
    rating: int
    author_ref: str
    target_ref: str
    img_url: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
