"""
API schemas for listing endpoints
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.listing import Listing


class ListingCreate(BaseModel):
    """Schema for posting a new yarn listing"""
    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=100)
    weight: str = Field(..., min_length=1, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)
    hook_size: str = Field(..., min_length=1, max_length=20)
    needle_size: str = Field(..., min_length=1, max_length=20)
    materials: List[str] = Field(..., min_length=1)
    img_url: List[str] = []


class ListingResponse(BaseModel):
    id: str
    name: str
    color: str
    weight: str
    brand: Optional[str] = None
    recommended_hook_size: str
    recommended_needle_size: str
    materials: List[str]
    img_url: List[str]
    average_rating: float
    review_refs: List[str]
    review_count: int
    owner_ref: str
    created_at: datetime

    @classmethod
    def from_listing(cls, listing: Listing) -> "ListingResponse":
        return cls(
            review_count=listing.review_count,
            **listing.model_dump(exclude={"version"}),
        )


class ListingPage(BaseModel):
    """Paginated listing results"""
    listings: List[ListingResponse]
    total_count: int
    skip: int
    limit: Optional[int] = None
