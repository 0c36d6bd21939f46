"""
Authentication dependencies for FastAPI
Validates the bearer token and yields the verified identity
"""

from typing import Optional

from fastapi import Depends, Header

from app.core.config import config
from app.core.errors import Unauthenticated, Unauthorized
from app.core.logger import logger
from app.models.user import User
from app.services.authenticator import Authenticator, authenticator


def get_authenticator() -> Authenticator:
    return authenticator


async def get_current_user(
    authorization: Optional[str] = Header(None),
    auth: Authenticator = Depends(get_authenticator),
) -> User:
    """
    Dependency extracting the verified identity from ``Authorization: Bearer <token>``.
    Raises Unauthenticated (401) when the header is missing or the token invalid.

    Usage:
        @router.post("/")
        async def create_item(user: User = Depends(get_current_user)):
            ...
    """
    if not authorization:
        logger.warning("Authentication required: No token provided")
        raise Unauthenticated("Authentication required")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise Unauthenticated("Invalid authorization header format. Expected 'Bearer <token>'")

    user = auth.verify(token.strip())
    logger.debug(f"Authentication successful for user: {user.id}")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency allowing only author ids listed in ``config.admin_ids``"""
    if user.id not in config.admin_ids:
        logger.warning(f"Admin access denied for user: {user.id}", user_id=user.id)
        raise Unauthorized("Admin privileges required")
    return user
