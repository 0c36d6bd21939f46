"""
Review API endpoints
Thin HTTP layer over the review lifecycle service
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import get_current_user
from app.dependencies.services import get_review_service
from app.models.user import User
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from app.services.review import ReviewService

router = APIRouter()

ERROR_RESPONSES = {
    401: {"model": ErrorResponseModel},
    403: {"model": ErrorResponseModel},
    404: {"model": ErrorResponseModel},
    422: {"model": ErrorResponseModel},
    503: {"model": ErrorResponseModel},
}


@router.post(
    "/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_review(
    body: ReviewCreate,
    user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Post a review on a listing as the authenticated author"""
    review = await service.create_review(
        body.listing_id, user.id, body.content, body.rating, body.img_url
    )
    return review.model_dump()


@router.get("/reviews/{review_id}", response_model=ReviewResponse, responses=ERROR_RESPONSES)
async def get_review(review_id: str, service: ReviewService = Depends(get_review_service)):
    review = await service.get_review(review_id)
    return review.model_dump()


@router.put("/reviews/{review_id}", response_model=ReviewResponse, responses=ERROR_RESPONSES)
async def edit_review(
    review_id: str,
    body: ReviewUpdate,
    user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Edit content, rating or images of one of your own reviews"""
    review = await service.edit_review(
        review_id, user.id, body.content, body.rating, body.img_url
    )
    return review.model_dump()


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
)
async def delete_review(
    review_id: str,
    user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    await service.delete_review(review_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/listings/{listing_id}/reviews",
    response_model=List[ReviewResponse],
    responses=ERROR_RESPONSES,
)
async def list_listing_reviews(listing_id: str, service: ReviewService = Depends(get_review_service)):
    """Reviews on a listing, latest first"""
    return [r.model_dump() for r in await service.list_listing_reviews(listing_id)]


@router.get(
    "/authors/{author_id}/reviews",
    response_model=List[ReviewResponse],
    responses=ERROR_RESPONSES,
)
async def list_author_reviews(author_id: str, service: ReviewService = Depends(get_review_service)):
    """Reviews written by an author, latest first"""
    return [r.model_dump() for r in await service.list_author_reviews(author_id)]
