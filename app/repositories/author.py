"""
Author repository
"""

from typing import Optional

from app.models.author import Author
from app.repositories.mongo import MongoRepository


class AuthorQueries:
    """Author lookups built on the store's ``find``"""

    async def get_by_handle(self, handle: str) -> Optional[Author]:
        return await self.find_one({"handle": handle})


class AuthorRepository(AuthorQueries, MongoRepository[Author]):
    model = Author
    label = "author"
