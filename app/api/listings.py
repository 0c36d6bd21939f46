"""
Listing API endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import get_current_user
from app.dependencies.services import get_listing_service
from app.models.user import User
from app.schemas.listing import ListingCreate, ListingPage, ListingResponse
from app.services.listing import ListingService

router = APIRouter()


@router.get("", response_model=ListingPage, responses={503: {"model": ErrorResponseModel}})
async def list_listings(
    skip: int = Query(0, ge=0, description="Number of items to skip"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Max items to return (omit for all)"),
    service: ListingService = Depends(get_listing_service),
):
    listings, total_count = await service.list_listings(skip, limit)
    return ListingPage(
        listings=[ListingResponse.from_listing(listing) for listing in listings],
        total_count=total_count,
        skip=skip,
        limit=limit,
    )


@router.get(
    "/{listing_id}",
    response_model=ListingResponse,
    responses={404: {"model": ErrorResponseModel}, 422: {"model": ErrorResponseModel}},
)
async def get_listing(listing_id: str, service: ListingService = Depends(get_listing_service)):
    return ListingResponse.from_listing(await service.get_listing(listing_id))


@router.post(
    "",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponseModel}, 422: {"model": ErrorResponseModel}},
)
async def create_listing(
    body: ListingCreate,
    user: User = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service),
):
    """Post a new yarn listing as the authenticated author"""
    return ListingResponse.from_listing(await service.create_listing(user.id, body))
