"""
Consistency repair report
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.base import utc_now


class DanglingReference(BaseModel):
    """A back-reference to a review that no longer exists"""
    collection: str
    owner_id: str
    review_id: str


class OrphanReview(BaseModel):
    """A review missing from its listing's or author's back-references"""
    review_id: str
    listing_id: str
    author_id: str
    action: str  # relinked | deleted


class RepairReport(BaseModel):
    dry_run: bool = False
    started_at: datetime = Field(default_factory=utc_now)
    finished_at: Optional[datetime] = None
    reviews_scanned: int = 0
    listings_scanned: int = 0
    authors_scanned: int = 0
    dangling_references: List[DanglingReference] = []
    orphan_reviews: List[OrphanReview] = []
    ratings_recomputed: List[str] = []

    @property
    def clean(self) -> bool:
        return not (self.dangling_references or self.orphan_reviews or self.ratings_recomputed)
