"""
Review lifecycle: create, edit and delete reviews while keeping the listing's
``review_refs``/``average_rating`` and the author's ``review_refs`` in step.

The store only offers single-document atomic writes, so each operation issues
its writes in a fixed order:

* create inserts the review first, then links it. A failure part-way leaves an
  orphan review (exists, not linked), never a reference to a missing review.
* delete removes the review first, then retracts the references. A failure
  part-way leaves dangling references, never a linked review that is gone
  from only one side.

Neither state is rolled back here; ``ConsistencyRepairService`` finds and
fixes both. Once the first write is issued the remaining steps are shielded
from cancellation so a cancelled request cannot stop half way.

Listing writes are read-then-write. Every listing update carries the version
it was computed from; on a version mismatch the average is recomputed and the
write retried, and after ``rating_update_max_retries`` the write is applied
unconditionally (last writer wins).
"""

import asyncio
from typing import List, Optional

from app.core.config import config
from app.core.errors import ErrorResponse, NotFound, ValidationFailed
from app.core.logger import logger
from app.models.base import utc_now
from app.models.review import Review
from app.repositories.author import AuthorRepository
from app.repositories.listing import ListingRepository
from app.repositories.review import ReviewRepository
from app.services.access_guard import require_authenticated, require_owner
from app.services.rating import compute_average
from app.validators import check_content, check_images, check_object_id, check_rating


class ReviewService:
    """Coordinates review writes across the reviews, listings and authors collections"""

    def __init__(self, reviews: ReviewRepository, listings: ListingRepository,
                 authors: AuthorRepository):
        self.reviews = reviews
        self.listings = listings
        self.authors = authors

    # Reads

    async def get_review(self, review_id: str) -> Review:
        check_object_id(review_id, "review_id")
        review = await self.reviews.get(review_id)
        if review is None:
            raise NotFound("Review not found")
        return review

    async def list_listing_reviews(self, listing_id: str) -> List[Review]:
        check_object_id(listing_id, "listing_id")
        if not await self.listings.exists(listing_id):
            raise NotFound("Listing not found")
        return await self.reviews.for_listing(listing_id)

    async def list_author_reviews(self, author_id: str) -> List[Review]:
        check_object_id(author_id, "author_id")
        if not await self.authors.exists(author_id):
            raise NotFound("Author not found")
        return await self.reviews.by_author(author_id)

    # Create

    async def create_review(self, target_listing_id: str, author_id: str, content: str,
                            rating: int, images: Optional[List[str]] = None) -> Review:
        """
        Create a review and link it from its listing and author.

        Raises:
            ValidationFailed: bad identifier, content or rating (nothing written)
            NotFound: listing or author does not exist (nothing written)
            StoreUnavailable: persistence failure; may leave an orphan review
        """
        check_object_id(target_listing_id, "listing_id")
        check_object_id(require_authenticated(author_id), "author_id")
        check_content(content)
        check_rating(rating)
        images = check_images(images)

        if not await self.listings.exists(target_listing_id):
            raise NotFound("Listing not found")
        if not await self.authors.exists(author_id):
            raise NotFound("Author not found")

        review = Review(
            content=content,
            rating=rating,
            author_ref=author_id,
            target_ref=target_listing_id,
            img_url=images,
        )
        return await asyncio.shield(self._insert_and_link(review))

    async def _insert_and_link(self, review: Review) -> Review:
        review.id = await self.reviews.insert(review)

        step = "listing_link"
        try:
            average = await self.refresh_listing(review.target_ref, push_ref=review.id)
            if average is None:
                raise NotFound("Listing not found")

            step = "author_link"
            if not await self.authors.push_ref(review.author_ref, review.id):
                raise NotFound("Author not found")
        except ErrorResponse as e:
            logger.error(
                f"Review {review.id} left unlinked after {step} failed",
                user_id=review.author_ref,
                error=e,
                metadata={
                    "event": "review_link_failed",
                    "review_id": review.id,
                    "listing_id": review.target_ref,
                    "step": step,
                },
            )
            raise

        logger.info(
            f"Created review {review.id} on listing {review.target_ref}",
            user_id=review.author_ref,
            metadata={
                "event": "review_created",
                "review_id": review.id,
                "listing_id": review.target_ref,
                "rating": review.rating,
                "average_rating": average,
            },
        )
        return review

    # Edit

    async def edit_review(self, review_id: str, acting_identity: str,
                          new_content: Optional[str] = None,
                          new_rating: Optional[int] = None,
                          new_images: Optional[List[str]] = None) -> Review:
        """
        Update a review's content, rating and images. Fields passed as None
        keep their current value. The listing is only touched when the rating
        actually changes.

        Raises:
            ValidationFailed, NotFound, Unauthorized, StoreUnavailable
        """
        check_object_id(review_id, "review_id")
        changes = {}
        if new_content is not None:
            changes["content"] = check_content(new_content)
        if new_rating is not None:
            changes["rating"] = check_rating(new_rating)
        if new_images is not None:
            changes["img_url"] = check_images(new_images)
        if not changes:
            raise ValidationFailed("No review fields to update")

        review = await self.get_review(review_id)
        await self._authorize(review, acting_identity)

        changes["updated_at"] = utc_now()
        return await asyncio.shield(self._apply_edit(review, changes))

    async def _apply_edit(self, review: Review, changes: dict) -> Review:
        if not await self.reviews.update_fields(review.id, changes):
            raise NotFound("Review not found")
        updated = review.model_copy(update=changes)

        if updated.rating != review.rating:
            average = await self.refresh_listing(review.target_ref)
            if average is None:
                logger.warning(
                    f"Listing {review.target_ref} missing while re-rating review {review.id}",
                    metadata={"event": "review_listing_missing", "review_id": review.id},
                )
            logger.info(
                f"Re-rated review {review.id}",
                user_id=review.author_ref,
                metadata={
                    "event": "review_rating_changed",
                    "review_id": review.id,
                    "listing_id": review.target_ref,
                    "old_rating": review.rating,
                    "new_rating": updated.rating,
                    "average_rating": average,
                },
            )
        else:
            logger.info(
                f"Updated review {review.id}",
                user_id=review.author_ref,
                metadata={"event": "review_updated", "review_id": review.id},
            )
        return updated

    # Delete

    async def delete_review(self, review_id: str, acting_identity: str) -> None:
        """
        Delete a review, then retract it from its listing and author.

        Raises:
            ValidationFailed, NotFound, Unauthorized, StoreUnavailable
        """
        review = await self.get_review(review_id)
        await self._authorize(review, acting_identity)
        await asyncio.shield(self._delete_and_unlink(review))

    async def _delete_and_unlink(self, review: Review) -> None:
        if not await self.reviews.delete(review.id):
            raise NotFound("Review not found")

        step = "listing_unlink"
        try:
            average = await self.refresh_listing(review.target_ref, pull_ref=review.id)
            if average is None:
                logger.warning(
                    f"Listing {review.target_ref} missing while deleting review {review.id}",
                    metadata={"event": "review_listing_missing", "review_id": review.id},
                )

            step = "author_unlink"
            await self.authors.pull_ref(review.author_ref, review.id)
        except ErrorResponse as e:
            logger.error(
                f"Review {review.id} deleted but references remain after {step} failed",
                user_id=review.author_ref,
                error=e,
                metadata={
                    "event": "review_unlink_failed",
                    "review_id": review.id,
                    "listing_id": review.target_ref,
                    "step": step,
                },
            )
            raise

        logger.info(
            f"Deleted review {review.id} from listing {review.target_ref}",
            user_id=review.author_ref,
            metadata={
                "event": "review_deleted",
                "review_id": review.id,
                "listing_id": review.target_ref,
                "average_rating": average,
            },
        )

    # Listing aggregate

    async def refresh_listing(self, listing_id: str, push_ref: Optional[str] = None,
                              pull_ref: Optional[str] = None) -> Optional[float]:
        """
        Recompute a listing's average from its current reviews and write it,
        together with an optional ref push/pull, in one document update.

        Returns the written average, or None if the listing does not exist.
        """
        for attempt in range(config.rating_update_max_retries):
            # Version first: a write landing after this read makes ours miss
            listing = await self.listings.get(listing_id)
            if listing is None:
                return None
            average = await self._current_average(listing_id)
            if await self._write_listing(listing_id, average, push_ref, pull_ref, listing.version):
                return average
            logger.debug(
                f"Listing {listing_id} changed concurrently, retrying rating update",
                metadata={"event": "rating_update_conflict", "listing_id": listing_id, "attempt": attempt + 1},
            )

        logger.warning(
            f"Rating update for listing {listing_id} still contended, writing unconditionally",
            metadata={"event": "rating_update_contended", "listing_id": listing_id},
        )
        average = await self._current_average(listing_id)
        if not await self._write_listing(listing_id, average, push_ref, pull_ref, None):
            return None
        return average

    async def _current_average(self, listing_id: str) -> float:
        reviews = await self.reviews.for_listing(listing_id)
        return compute_average(r.rating for r in reviews)

    async def _write_listing(self, listing_id, average, push_ref, pull_ref, expected_version) -> bool:
        fields = {"average_rating": average}
        if push_ref:
            return await self.listings.push_ref(listing_id, push_ref, fields, expected_version)
        if pull_ref:
            return await self.listings.pull_ref(listing_id, pull_ref, fields, expected_version)
        return await self.listings.update_fields(listing_id, fields, expected_version)

    async def _authorize(self, review: Review, acting_identity: str) -> None:
        # Compare against the stored author, not the caller's claim about it
        author = await self.authors.get(review.author_ref)
        if author is None:
            raise NotFound("Review author not found")
        require_owner(acting_identity, author.id, "review", review.id)
