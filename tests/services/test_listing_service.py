"""Tests for listing posting and reads"""
import pytest

from app.core.errors import NotFound, Unauthenticated, ValidationFailed
from app.schemas.listing import ListingCreate


def listing_payload(**overrides):
    data = {
        "name": "Merino DK",
        "color": "Forest Green",
        "weight": "DK",
        "brand": "Malabrigo",
        "hook_size": "4mm",
        "needle_size": "3.75mm",
        "materials": ["merino wool"],
    }
    data.update(overrides)
    return ListingCreate(**data)


class TestCreateListing:

    @pytest.mark.asyncio
    async def test_new_listing_is_unrated(self, listing_service, listings, make_author):
        owner = make_author()

        listing = await listing_service.create_listing(owner, listing_payload())

        stored = listings.docs[listing.id]
        assert stored["average_rating"] == 0
        assert stored["review_refs"] == []
        assert stored["owner_ref"] == owner
        assert stored["recommended_hook_size"] == "4mm"
        assert stored["recommended_needle_size"] == "3.75mm"

    @pytest.mark.asyncio
    async def test_requires_identity(self, listing_service, listings):
        with pytest.raises(Unauthenticated):
            await listing_service.create_listing(None, listing_payload())
        assert listings.docs == {}

    @pytest.mark.asyncio
    async def test_unknown_owner(self, listing_service, listings):
        with pytest.raises(NotFound):
            await listing_service.create_listing("507f1f77bcf86cd799439011", listing_payload())
        assert listings.docs == {}


class TestReadListings:

    @pytest.mark.asyncio
    async def test_get_listing(self, listing_service, make_author, make_listing):
        listing_id = make_listing(make_author(), name="Alpaca Lace")

        listing = await listing_service.get_listing(listing_id)

        assert listing.name == "Alpaca Lace"
        assert listing.review_count == 0

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, listing_service):
        with pytest.raises(ValidationFailed):
            await listing_service.get_listing("abc")

    @pytest.mark.asyncio
    async def test_get_missing(self, listing_service):
        with pytest.raises(NotFound):
            await listing_service.get_listing("507f1f77bcf86cd799439011")

    @pytest.mark.asyncio
    async def test_list_pages_with_total(self, listing_service, make_author):
        owner = make_author()
        for i in range(5):
            await listing_service.create_listing(owner, listing_payload(name=f"Yarn {i}"))

        page, total = await listing_service.list_listings(skip=1, limit=2)

        assert total == 5
        assert len(page) == 2

    @pytest.mark.asyncio
    async def test_list_without_limit_returns_all(self, listing_service, make_author, make_listing):
        owner = make_author()
        make_listing(owner, "One")
        make_listing(owner, "Two")

        page, total = await listing_service.list_listings()

        assert total == 2
        assert {listing.name for listing in page} == {"One", "Two"}
