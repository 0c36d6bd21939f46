"""
API schemas for author registration, login and profile endpoints
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.author import Author
from app.validators.author_validators import AuthorValidatorMixin, MIN_PASSWORD_LENGTH


class AuthorRegister(AuthorValidatorMixin, BaseModel):
    handle: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class AuthorLogin(BaseModel):
    handle: str
    password: str


class AuthorUpdate(AuthorValidatorMixin, BaseModel):
    handle: Optional[str] = None
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH)


class AuthorResponse(BaseModel):
    """Public author profile; the credential is never included"""
    id: str
    handle: str
    review_refs: List[str]
    created_at: datetime

    @classmethod
    def from_author(cls, author: Author) -> "AuthorResponse":
        return cls(**author.model_dump(exclude={"credential"}))


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegistrationResponse(TokenResponse):
    id: str
