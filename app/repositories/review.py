"""
Review repository
"""

from typing import List

from app.models.review import Review
from app.repositories.mongo import MongoRepository

NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


class ReviewQueries:
    """Review lookups built on the store's ``find``"""

    async def for_listing(self, listing_id: str) -> List[Review]:
        """Reviews targeting a listing, newest first"""
        return await self.find({"target_ref": listing_id}, sort=NEWEST_FIRST)

    async def by_author(self, author_id: str) -> List[Review]:
        """Reviews written by an author, newest first"""
        return await self.find({"author_ref": author_id}, sort=NEWEST_FIRST)


class ReviewRepository(ReviewQueries, MongoRepository[Review]):
    model = Review
    label = "review"
