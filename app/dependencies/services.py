"""
Dependency injection for repositories and services
"""

from fastapi import Depends

from app.db.mongodb import get_author_collection, get_listing_collection, get_review_collection
from app.dependencies.auth import get_authenticator
from app.repositories.author import AuthorRepository
from app.repositories.listing import ListingRepository
from app.repositories.review import ReviewRepository
from app.services.authenticator import Authenticator
from app.services.author import AuthorService
from app.services.listing import ListingService
from app.services.repair import ConsistencyRepairService
from app.services.review import ReviewService


async def get_listing_repository() -> ListingRepository:
    return ListingRepository(await get_listing_collection())


async def get_author_repository() -> AuthorRepository:
    return AuthorRepository(await get_author_collection())


async def get_review_repository() -> ReviewRepository:
    return ReviewRepository(await get_review_collection())


async def get_review_service(
    reviews: ReviewRepository = Depends(get_review_repository),
    listings: ListingRepository = Depends(get_listing_repository),
    authors: AuthorRepository = Depends(get_author_repository),
) -> ReviewService:
    return ReviewService(reviews, listings, authors)


async def get_listing_service(
    listings: ListingRepository = Depends(get_listing_repository),
    authors: AuthorRepository = Depends(get_author_repository),
) -> ListingService:
    return ListingService(listings, authors)


async def get_author_service(
    authors: AuthorRepository = Depends(get_author_repository),
    auth: Authenticator = Depends(get_authenticator),
) -> AuthorService:
    return AuthorService(authors, auth)


async def get_repair_service(
    reviews: ReviewRepository = Depends(get_review_repository),
    listings: ListingRepository = Depends(get_listing_repository),
    authors: AuthorRepository = Depends(get_author_repository),
    review_service: ReviewService = Depends(get_review_service),
) -> ConsistencyRepairService:
    return ConsistencyRepairService(reviews, listings, authors, review_service)
