"""
Out-of-band consistency repair.

Review writes are ordered so that an interrupted create leaves an orphan
review and an interrupted delete leaves dangling references. This sweep
finds both and fixes them, then rewrites any listing average that no longer
matches its reviews:

* dangling reference: pulled from the listing or author holding it
* orphan whose listing and author both exist: linked again (idempotent push)
* orphan whose listing or author is gone: deleted

Requests keep running while the sweep does, so every snapshot finding is
checked against the store again before anything is pulled or deleted.

Listing writes go through ``ReviewService.refresh_listing`` so the average is
recomputed under the same version check the request path uses.
"""

import math
from collections import defaultdict
from typing import Dict, List, Set

from app.core.logger import logger
from app.models.base import utc_now
from app.models.review import Review
from app.repositories.author import AuthorRepository
from app.repositories.listing import ListingRepository
from app.repositories.review import ReviewRepository
from app.schemas.repair import DanglingReference, OrphanReview, RepairReport
from app.services.rating import compute_average
from app.services.review import ReviewService


class ConsistencyRepairService:
    """Detects and repairs orphans, dangling references and rating drift"""

    def __init__(self, reviews: ReviewRepository, listings: ListingRepository,
                 authors: AuthorRepository, review_service: ReviewService):
        self.reviews = reviews
        self.listings = listings
        self.authors = authors
        self.review_service = review_service

    async def run(self, dry_run: bool = False) -> RepairReport:
        report = RepairReport(dry_run=dry_run)
        logger.info("Consistency repair started", metadata={"event": "repair_started", "dry_run": dry_run})

        # Parents first: a review linked after these reads is then also in
        # the review snapshot, so its refs are never taken for dangling.
        listings = await self.listings.find({})
        authors = await self.authors.find({})
        reviews = await self.reviews.find({})
        report.reviews_scanned = len(reviews)
        report.listings_scanned = len(listings)
        report.authors_scanned = len(authors)

        review_ids = {review.id for review in reviews}
        listing_refs = {listing.id: set(listing.review_refs) for listing in listings}
        author_refs = {author.id: set(author.review_refs) for author in authors}
        # Listings whose average must be rewritten whatever it currently holds
        touched: Set[str] = set()

        for listing in listings:
            for ref in _unique(listing.review_refs):
                if not await self._is_dangling(ref, review_ids):
                    continue
                report.dangling_references.append(
                    DanglingReference(collection="listings", owner_id=listing.id, review_id=ref)
                )
                touched.add(listing.id)
                if not dry_run:
                    await self.review_service.refresh_listing(listing.id, pull_ref=ref)
                logger.warning(
                    f"Dangling review reference {ref} on listing {listing.id}",
                    metadata={"event": "repair_dangling_reference", "collection": "listings",
                              "owner_id": listing.id, "review_id": ref},
                )

        for author in authors:
            for ref in _unique(author.review_refs):
                if not await self._is_dangling(ref, review_ids):
                    continue
                report.dangling_references.append(
                    DanglingReference(collection="authors", owner_id=author.id, review_id=ref)
                )
                if not dry_run:
                    await self.authors.pull_ref(author.id, ref)
                logger.warning(
                    f"Dangling review reference {ref} on author {author.id}",
                    metadata={"event": "repair_dangling_reference", "collection": "authors",
                              "owner_id": author.id, "review_id": ref},
                )

        surviving: Dict[str, List[int]] = defaultdict(list)
        for review in reviews:
            on_listing = listing_refs.get(review.target_ref)
            on_author = author_refs.get(review.author_ref)

            if on_listing is None or on_author is None:
                listing_exists = on_listing is not None or await self.listings.exists(review.target_ref)
                author_exists = on_author is not None or await self.authors.exists(review.author_ref)
                if listing_exists and author_exists:
                    # Parent created after the snapshot; left for the next sweep
                    continue
                report.orphan_reviews.append(_orphan(review, "deleted"))
                if not dry_run:
                    await self._delete_orphan(review, listing_exists, author_exists)
                if on_listing is not None:
                    touched.add(review.target_ref)
                logger.warning(
                    f"Deleted orphan review {review.id} whose listing or author is gone",
                    metadata={"event": "repair_orphan_deleted", "review_id": review.id},
                )
                continue

            if review.id in on_listing and review.id in on_author:
                surviving[review.target_ref].append(review.rating)
                continue
            # Relinking a review deleted since the snapshot would create a dangling ref
            if not await self.reviews.exists(review.id):
                continue

            surviving[review.target_ref].append(review.rating)
            report.orphan_reviews.append(_orphan(review, "relinked"))
            if not dry_run:
                if review.id not in on_listing:
                    await self.review_service.refresh_listing(review.target_ref, push_ref=review.id)
                if review.id not in on_author:
                    await self.authors.push_ref(review.author_ref, review.id)
            if review.id not in on_listing:
                touched.add(review.target_ref)
            logger.warning(
                f"Relinked orphan review {review.id}",
                metadata={"event": "repair_orphan_relinked", "review_id": review.id,
                          "listing_id": review.target_ref},
            )

        for listing in listings:
            expected = compute_average(surviving.get(listing.id, []))
            drifted = not math.isclose(listing.average_rating, expected)
            if listing.id not in touched and not drifted:
                continue
            report.ratings_recomputed.append(listing.id)
            # Touched listings already had their average rewritten with the ref change
            if drifted and listing.id not in touched and not dry_run:
                await self.review_service.refresh_listing(listing.id)

        report.finished_at = utc_now()
        logger.info(
            "Consistency repair finished",
            metadata={
                "event": "repair_finished",
                "dry_run": dry_run,
                "dangling_references": len(report.dangling_references),
                "orphan_reviews": len(report.orphan_reviews),
                "ratings_recomputed": len(report.ratings_recomputed),
            },
        )
        return report

    async def _is_dangling(self, ref: str, review_ids: Set[str]) -> bool:
        """A ref is only pruned once the review is confirmed gone from the store"""
        if ref in review_ids:
            return False
        return not await self.reviews.exists(ref)

    async def _delete_orphan(self, review: Review, listing_exists: bool, author_exists: bool) -> None:
        await self.reviews.delete(review.id)
        if listing_exists:
            await self.review_service.refresh_listing(review.target_ref, pull_ref=review.id)
        if author_exists:
            await self.authors.pull_ref(review.author_ref, review.id)


def _unique(refs: List[str]) -> List[str]:
    return list(dict.fromkeys(refs))


def _orphan(review: Review, action: str) -> OrphanReview:
    return OrphanReview(
        review_id=review.id,
        listing_id=review.target_ref,
        author_id=review.author_ref,
        action=action,
    )
