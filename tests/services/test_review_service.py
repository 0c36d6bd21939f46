"""Tests for the review lifecycle service"""
import asyncio
from copy import deepcopy

import pytest

from app.core.errors import NotFound, StoreUnavailable, Unauthorized, ValidationFailed

MISSING_ID = "507f1f77bcf86cd799439099"


def snapshot(*repos):
    return [deepcopy(repo.docs) for repo in repos]


class TestReviewScenario:

    @pytest.mark.asyncio
    async def test_average_follows_create_edit_delete(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        u1 = make_author("alice")
        u2 = make_author("bob")
        listing_id = make_listing(u1)
        assert listings.docs[listing_id]["average_rating"] == 0

        r1 = await review_service.create_review(listing_id, u1, "Lovely stitch definition", 4)
        assert listings.docs[listing_id]["average_rating"] == 4
        assert listings.docs[listing_id]["review_refs"] == [r1.id]
        assert authors.docs[u1]["review_refs"] == [r1.id]

        r2 = await review_service.create_review(listing_id, u2, "Splits a lot", 2)
        assert listings.docs[listing_id]["average_rating"] == 3
        assert listings.docs[listing_id]["review_refs"] == [r1.id, r2.id]

        await review_service.edit_review(r1.id, u1, new_rating=5)
        assert listings.docs[listing_id]["average_rating"] == 3.5

        await review_service.delete_review(r2.id, u2)
        assert listings.docs[listing_id]["average_rating"] == 5
        assert listings.docs[listing_id]["review_refs"] == [r1.id]
        assert r2.id not in reviews.docs
        assert r2.id not in authors.docs[u2]["review_refs"]

    @pytest.mark.asyncio
    async def test_refs_match_review_targets_after_mixed_operations(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        owner = make_author("owner")
        writers = [make_author(f"writer{i}") for i in range(3)]
        first = make_listing(owner, "Alpaca")
        second = make_listing(owner, "Cotton")

        created = []
        for i, writer in enumerate(writers):
            created.append(await review_service.create_review(first, writer, "first", i + 1))
            created.append(await review_service.create_review(second, writer, "second", 5 - i))
        await review_service.delete_review(created[0].id, writers[0])
        await review_service.edit_review(created[3].id, writers[1], new_rating=1)

        for listing_id in (first, second):
            live = {r["id"] for r in reviews.docs.values() if r["target_ref"] == listing_id}
            assert set(listings.docs[listing_id]["review_refs"]) == live
            ratings = [r["rating"] for r in reviews.docs.values() if r["target_ref"] == listing_id]
            assert listings.docs[listing_id]["average_rating"] == sum(ratings) / len(ratings)
        for author_id in writers:
            live = {r["id"] for r in reviews.docs.values() if r["author_ref"] == author_id}
            assert set(authors.docs[author_id]["review_refs"]) == live

    @pytest.mark.asyncio
    async def test_concurrent_creates_on_one_listing(
        self, review_service, listings, make_author, make_listing
    ):
        owner = make_author("owner")
        listing_id = make_listing(owner)
        writers = [make_author(f"writer{i}") for i in range(4)]

        created = await asyncio.gather(*[
            review_service.create_review(listing_id, writer, "concurrent", rating)
            for writer, rating in zip(writers, [1, 2, 4, 5])
        ])

        assert set(listings.docs[listing_id]["review_refs"]) == {r.id for r in created}
        assert listings.docs[listing_id]["average_rating"] == 3


class TestCreateReview:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1, True, 4.5])
    async def test_out_of_range_rating_writes_nothing(
        self, review_service, reviews, listings, authors, make_author, make_listing, rating
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        before = snapshot(reviews, listings, authors)

        with pytest.raises(ValidationFailed) as exc_info:
            await review_service.create_review(listing_id, author_id, "text", rating)

        assert exc_info.value.status_code == 422
        assert "insert" not in reviews.calls
        assert snapshot(reviews, listings, authors) == before

    @pytest.mark.asyncio
    async def test_malformed_listing_id(self, review_service, make_author):
        with pytest.raises(ValidationFailed):
            await review_service.create_review("not-an-id", make_author(), "text", 3)

    @pytest.mark.asyncio
    async def test_blank_content_rejected(self, review_service, make_author, make_listing):
        author_id = make_author()
        with pytest.raises(ValidationFailed):
            await review_service.create_review(make_listing(author_id), author_id, "   ", 3)

    @pytest.mark.asyncio
    async def test_unknown_listing(self, review_service, reviews, make_author):
        with pytest.raises(NotFound) as exc_info:
            await review_service.create_review(MISSING_ID, make_author(), "text", 3)
        assert exc_info.value.message == "Listing not found"
        assert reviews.docs == {}

    @pytest.mark.asyncio
    async def test_unknown_author(self, review_service, reviews, make_author, make_listing):
        listing_id = make_listing(make_author())
        with pytest.raises(NotFound) as exc_info:
            await review_service.create_review(listing_id, MISSING_ID, "text", 3)
        assert exc_info.value.message == "Author not found"
        assert reviews.docs == {}

    @pytest.mark.asyncio
    async def test_returns_stored_review(self, review_service, reviews, make_author, make_listing):
        author_id = make_author()
        listing_id = make_listing(author_id)

        review = await review_service.create_review(
            listing_id, author_id, "Great drape", 5, ["https://img.example/1.jpg"]
        )

        stored = reviews.docs[review.id]
        assert stored["author_ref"] == author_id
        assert stored["target_ref"] == listing_id
        assert stored["img_url"] == ["https://img.example/1.jpg"]
        assert review.rating == 5

    @pytest.mark.asyncio
    async def test_author_link_failure_leaves_orphan(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        authors.fail("push_ref")

        with pytest.raises(StoreUnavailable):
            await review_service.create_review(listing_id, author_id, "text", 4)

        (review_id,) = reviews.docs
        assert listings.docs[listing_id]["review_refs"] == [review_id]
        assert authors.docs[author_id]["review_refs"] == []

    @pytest.mark.asyncio
    async def test_listing_link_failure_leaves_orphan(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        listings.fail("push_ref")

        with pytest.raises(StoreUnavailable):
            await review_service.create_review(listing_id, author_id, "text", 4)

        assert len(reviews.docs) == 1
        assert listings.docs[listing_id]["review_refs"] == []
        assert listings.docs[listing_id]["average_rating"] == 0
        assert "push_ref" not in authors.calls

    @pytest.mark.asyncio
    async def test_cancellation_after_insert_still_links(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        gate = asyncio.Event()
        original_push = authors.push_ref

        async def slow_push(*args, **kwargs):
            await gate.wait()
            return await original_push(*args, **kwargs)

        authors.push_ref = slow_push
        task = asyncio.create_task(review_service.create_review(listing_id, author_id, "text", 4))
        while "push_ref" not in listings.calls:
            await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        gate.set()
        for _ in range(10):
            await asyncio.sleep(0)

        (review_id,) = reviews.docs
        assert authors.docs[author_id]["review_refs"] == [review_id]
        assert listings.docs[listing_id]["review_refs"] == [review_id]


class TestEditReview:

    @pytest.mark.asyncio
    async def test_content_only_edit_leaves_listing_untouched(
        self, review_service, listings, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        review = await review_service.create_review(listing_id, author_id, "first take", 4)
        listing_before = deepcopy(listings.docs[listing_id])
        listings.calls.clear()

        updated = await review_service.edit_review(review.id, author_id, new_content="second take")

        assert updated.content == "second take"
        assert updated.updated_at is not None
        assert listings.calls == []
        assert listings.docs[listing_id] == listing_before

    @pytest.mark.asyncio
    async def test_same_rating_does_not_touch_listing(
        self, review_service, listings, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        review = await review_service.create_review(listing_id, author_id, "text", 4)
        listings.calls.clear()

        await review_service.edit_review(review.id, author_id, new_content="new", new_rating=4)

        assert listings.calls == []

    @pytest.mark.asyncio
    async def test_other_author_cannot_edit(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        owner = make_author("owner")
        intruder = make_author("intruder")
        review = await review_service.create_review(make_listing(owner), owner, "mine", 4)
        before = snapshot(reviews, listings, authors)

        with pytest.raises(Unauthorized):
            await review_service.edit_review(review.id, intruder, new_rating=1)

        assert snapshot(reviews, listings, authors) == before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_out_of_range_rating(self, review_service, reviews, make_author, make_listing, rating):
        author_id = make_author()
        review = await review_service.create_review(make_listing(author_id), author_id, "text", 4)
        reviews.calls.clear()

        with pytest.raises(ValidationFailed):
            await review_service.edit_review(review.id, author_id, new_rating=rating)

        assert "update_fields" not in reviews.calls
        assert reviews.docs[review.id]["rating"] == 4

    @pytest.mark.asyncio
    async def test_missing_review(self, review_service, make_author):
        with pytest.raises(NotFound):
            await review_service.edit_review(MISSING_ID, make_author(), new_content="x")

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, review_service, make_author):
        with pytest.raises(ValidationFailed):
            await review_service.edit_review(MISSING_ID, make_author())


class TestDeleteReview:

    @pytest.mark.asyncio
    async def test_deleting_only_review_resets_average(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        review = await review_service.create_review(listing_id, author_id, "text", 2)

        await review_service.delete_review(review.id, author_id)

        assert listings.docs[listing_id]["average_rating"] == 0
        assert listings.docs[listing_id]["review_refs"] == []
        assert authors.docs[author_id]["review_refs"] == []
        assert reviews.docs == {}

    @pytest.mark.asyncio
    async def test_other_author_cannot_delete(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        owner = make_author("owner")
        intruder = make_author("intruder")
        review = await review_service.create_review(make_listing(owner), owner, "mine", 4)
        before = snapshot(reviews, listings, authors)

        with pytest.raises(Unauthorized):
            await review_service.delete_review(review.id, intruder)

        assert snapshot(reviews, listings, authors) == before

    @pytest.mark.asyncio
    async def test_listing_unlink_failure_leaves_dangling_refs(
        self, review_service, reviews, listings, authors, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        review = await review_service.create_review(listing_id, author_id, "text", 4)
        listings.fail("pull_ref")

        with pytest.raises(StoreUnavailable):
            await review_service.delete_review(review.id, author_id)

        assert review.id not in reviews.docs
        assert listings.docs[listing_id]["review_refs"] == [review.id]
        assert authors.docs[author_id]["review_refs"] == [review.id]

    @pytest.mark.asyncio
    async def test_missing_review(self, review_service, make_author):
        with pytest.raises(NotFound):
            await review_service.delete_review(MISSING_ID, make_author())


class TestRefreshListing:

    @pytest.mark.asyncio
    async def test_retries_after_concurrent_listing_write(
        self, review_service, listings, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        original_push = listings.push_ref
        attempts = []

        async def racing_push(doc_id, ref_id, fields=None, expected_version=None, **kwargs):
            attempts.append(expected_version)
            if len(attempts) == 1:
                # Another request updated the listing after our read
                listings.docs[doc_id]["version"] += 1
            return await original_push(doc_id, ref_id, fields, expected_version, **kwargs)

        listings.push_ref = racing_push
        review = await review_service.create_review(listing_id, author_id, "text", 3)

        assert attempts == [0, 1]
        assert listings.docs[listing_id]["review_refs"] == [review.id]
        assert listings.docs[listing_id]["version"] == 2

    @pytest.mark.asyncio
    async def test_falls_back_to_unconditional_write(
        self, review_service, listings, make_author, make_listing
    ):
        author_id = make_author()
        listing_id = make_listing(author_id)
        original_update = listings.update_fields
        attempts = []

        async def always_racing(doc_id, fields, expected_version=None):
            attempts.append(expected_version)
            if expected_version is not None:
                listings.docs[doc_id]["version"] += 1
            return await original_update(doc_id, fields, expected_version)

        listings.update_fields = always_racing
        average = await review_service.refresh_listing(listing_id)

        assert average == 0.0
        assert attempts[-1] is None
        assert len(attempts) == 4

    @pytest.mark.asyncio
    async def test_missing_listing_returns_none(self, review_service):
        assert await review_service.refresh_listing(MISSING_ID) is None
