"""
Author service: registration, login and profile changes
"""

from typing import Optional, Tuple

from app.core.errors import Conflict, NotFound, Unauthenticated, ValidationFailed
from app.core.logger import logger
from app.models.author import Author
from app.repositories.author import AuthorRepository
from app.services.access_guard import require_owner
from app.services.authenticator import Authenticator
from app.validators import check_handle, check_object_id, check_password


class AuthorService:
    """Service layer for authors"""

    def __init__(self, authors: AuthorRepository, authenticator: Authenticator):
        self.authors = authors
        self.authenticator = authenticator

    async def register_author(self, handle: str, password: str) -> Tuple[Author, str]:
        """
        Register a new author and issue an access token for it.

        Raises:
            ValidationFailed: handle is not alphanumeric or password too short
            Conflict: handle already taken (case-sensitive)
        """
        check_handle(handle)
        check_password(password)

        if await self.authors.get_by_handle(handle) is not None:
            raise Conflict("Handle is already taken", details={"field": "handle"})

        author = Author(handle=handle, credential=self.authenticator.hash_secret(password))
        # The unique index still catches a registration racing this one
        author.id = await self.authors.insert(author)

        logger.info(
            f"Registered author {author.id}",
            user_id=author.id,
            metadata={"event": "author_registered", "author_id": author.id},
        )
        return author, self.authenticator.issue(author.id, author.handle)

    async def login(self, handle: str, password: str) -> str:
        author = await self.authors.get_by_handle(handle) if handle else None
        if author is None or not self.authenticator.verify_secret(password or "", author.credential):
            logger.warning("Login failed", metadata={"event": "login_failed"})
            raise Unauthenticated("Invalid credentials")

        logger.info("Author logged in", user_id=author.id, metadata={"event": "login_succeeded"})
        return self.authenticator.issue(author.id, author.handle)

    async def get_author(self, author_id: str) -> Author:
        check_object_id(author_id, "author_id")
        author = await self.authors.get(author_id)
        if author is None:
            raise NotFound("Author not found")
        return author

    async def update_author(self, author_id: str, acting_identity: str,
                            handle: Optional[str] = None,
                            password: Optional[str] = None) -> Author:
        """Change an author's own handle and/or password"""
        if handle is None and password is None:
            raise ValidationFailed("Nothing to update")
        if handle is not None:
            check_handle(handle)
        if password is not None:
            check_password(password)

        author = await self.get_author(author_id)
        require_owner(acting_identity, author.id, "profile", author.id)

        changes = {}
        if handle is not None and handle != author.handle:
            if await self.authors.get_by_handle(handle) is not None:
                raise Conflict("Handle is already taken", details={"field": "handle"})
            changes["handle"] = handle
        if password is not None:
            changes["credential"] = self.authenticator.hash_secret(password)

        if changes and not await self.authors.update_fields(author.id, changes):
            raise NotFound("Author not found")

        logger.info(
            f"Updated author {author.id}",
            user_id=author.id,
            metadata={"event": "author_updated", "fields": sorted(changes)},
        )
        return author.model_copy(update=changes)
