"""Shared test fixtures"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from app.models.author import Author
from app.models.listing import Listing
from app.services.authenticator import Authenticator
from app.services.author import AuthorService
from app.services.listing import ListingService
from app.services.repair import ConsistencyRepairService
from app.services.review import ReviewService
from tests.fakes import FakeAuthorRepository, FakeListingRepository, FakeReviewRepository


@pytest.fixture
def listings():
    return FakeListingRepository()


@pytest.fixture
def authors():
    return FakeAuthorRepository()


@pytest.fixture
def reviews():
    return FakeReviewRepository()


@pytest.fixture
def authenticator():
    """Authenticator with cheap hashing for fast tests"""
    return Authenticator(secret="test-secret", algorithm="HS256",
                         expiration_seconds=3600, hash_iterations=1000)


@pytest.fixture
def review_service(reviews, listings, authors):
    return ReviewService(reviews, listings, authors)


@pytest.fixture
def listing_service(listings, authors):
    return ListingService(listings, authors)


@pytest.fixture
def author_service(authors, authenticator):
    return AuthorService(authors, authenticator)


@pytest.fixture
def repair_service(reviews, listings, authors, review_service):
    return ConsistencyRepairService(reviews, listings, authors, review_service)


@pytest.fixture
def make_author(authors):
    """Seed an author directly in the store"""
    def _make(handle="knitter"):
        return authors.add(Author(handle=handle, credential="pbkdf2_sha256$1$salt$hash"))
    return _make


@pytest.fixture
def make_listing(listings):
    """Seed an unrated listing directly in the store"""
    def _make(owner_id, name="Merino DK"):
        return listings.add(Listing(
            name=name,
            color="Forest Green",
            weight="DK",
            brand="Malabrigo",
            recommended_hook_size="4mm",
            recommended_needle_size="4mm",
            materials=["merino wool"],
            owner_ref=owner_id,
        ))
    return _make


@pytest.fixture
def mock_collection():
    """Mock motor collection; ``find`` is synchronous and returns a cursor"""
    collection = AsyncMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    collection.cursor = cursor
    return collection
