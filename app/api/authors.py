"""
Author registration, login and profile endpoints
"""

from fastapi import APIRouter, Depends, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import get_current_user
from app.dependencies.services import get_author_service
from app.models.user import User
from app.schemas.author import (
    AuthorLogin,
    AuthorRegister,
    AuthorResponse,
    AuthorUpdate,
    RegistrationResponse,
    TokenResponse,
)
from app.services.author import AuthorService

router = APIRouter()


@router.post(
    "/authors",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponseModel}, 422: {"model": ErrorResponseModel}},
)
async def register_author(body: AuthorRegister, service: AuthorService = Depends(get_author_service)):
    author, token = await service.register_author(body.handle, body.password)
    return RegistrationResponse(id=author.id, access_token=token)


@router.post("/login", response_model=TokenResponse, responses={401: {"model": ErrorResponseModel}})
async def login(body: AuthorLogin, service: AuthorService = Depends(get_author_service)):
    return TokenResponse(access_token=await service.login(body.handle, body.password))


@router.get("/authors/{author_id}", response_model=AuthorResponse, responses={404: {"model": ErrorResponseModel}})
async def get_author(author_id: str, service: AuthorService = Depends(get_author_service)):
    return AuthorResponse.from_author(await service.get_author(author_id))


@router.put(
    "/authors/{author_id}",
    response_model=AuthorResponse,
    responses={403: {"model": ErrorResponseModel}, 409: {"model": ErrorResponseModel}},
)
async def update_author(
    author_id: str,
    body: AuthorUpdate,
    user: User = Depends(get_current_user),
    service: AuthorService = Depends(get_author_service),
):
    """Change your own handle or password"""
    author = await service.update_author(author_id, user.id, body.handle, body.password)
    return AuthorResponse.from_author(author)
