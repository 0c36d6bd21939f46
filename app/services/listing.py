"""
Listing service: posting and reading yarn listings
"""

from typing import Optional, Tuple, List

from app.core.errors import NotFound
from app.core.logger import logger
from app.models.listing import Listing
from app.repositories.author import AuthorRepository
from app.repositories.listing import ListingRepository
from app.schemas.listing import ListingCreate
from app.services.access_guard import require_authenticated
from app.validators import check_object_id

NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


class ListingService:
    """Service layer for yarn listings"""

    def __init__(self, listings: ListingRepository, authors: AuthorRepository):
        self.listings = listings
        self.authors = authors

    async def create_listing(self, owner_id: str, data: ListingCreate) -> Listing:
        """Post a listing owned by the authenticated author; it starts unrated"""
        check_object_id(require_authenticated(owner_id), "author_id")
        if not await self.authors.exists(owner_id):
            raise NotFound("Author not found")

        listing = Listing(
            name=data.name,
            color=data.color,
            weight=data.weight,
            brand=data.brand,
            recommended_hook_size=data.hook_size,
            recommended_needle_size=data.needle_size,
            materials=data.materials,
            img_url=data.img_url,
            owner_ref=owner_id,
        )
        listing.id = await self.listings.insert(listing)

        logger.info(
            f"Created listing {listing.id}",
            user_id=owner_id,
            metadata={"event": "listing_created", "listing_id": listing.id},
        )
        return listing

    async def get_listing(self, listing_id: str) -> Listing:
        check_object_id(listing_id, "listing_id")
        listing = await self.listings.get(listing_id)
        if listing is None:
            raise NotFound("Listing not found")
        return listing

    async def list_listings(self, skip: int = 0, limit: Optional[int] = None) -> Tuple[List[Listing], int]:
        """All listings, newest first, with the total count before paging"""
        listings = await self.listings.find({}, sort=NEWEST_FIRST)
        total_count = len(listings)
        end = skip + limit if limit is not None else None
        return listings[skip:end], total_count
