"""
Yarn listing document
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.base import Document, utc_now


class Listing(Document):
    """A yarn product posted by an author.

    ``average_rating`` and ``review_refs`` are derived and maintained only by
    the review workflow; ``version`` increments on each of its writes.
    """

    name: str
    color: str
    weight: str
    brand: Optional[str] = None
    recommended_hook_size: str
    recommended_needle_size: str
    materials: List[str]
    img_url: List[str] = Field(default_factory=list)

    average_rating: float = 0.0
    review_refs: List[str] = Field(default_factory=list)
    owner_ref: str
    version: int = 0
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def review_count(self) -> int:
        return len(self.review_refs)
