from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from archivist.core.calendar import Legend
from archivist.core.categories.services import create_category
from archivist.core.days.services import upsert_entry
from archivist.core.reviews import services as reviews_services
from archivist.core.reviews.models import Review, ReviewCategory
from archivist.core.reviews.services import (
    create_review,
    delete_review,
    group_reviews_by_entry,
    list_reviews_for_entries,
    update_review,
)
from archivist.response.response import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)

pytestmark = pytest.mark.integration


@pytest.fixture()
def entry(db, alice):
    day_entry, _ = upsert_entry(db, alice.id, date(2026, 5, 1), Legend.GOOD_DAY)
    return day_entry


class TestCreate:
    def test_duplicate_builtin_category_conflicts(self, db, alice, entry):
        create_review(db, alice.id, entry.id, ReviewCategory.WORK, "standup")

        with pytest.raises(ConflictError) as exc:
            create_review(db, alice.id, entry.id, ReviewCategory.WORK, "again")

        assert exc.value.code == "REVIEWS_ALREADY_EXISTS"
        assert exc.value.http_code == 409

    def test_one_review_per_builtin_category(self, db, alice, entry):
        for category in (ReviewCategory.WORK, ReviewCategory.PERSONAL, ReviewCategory.LEARNING):
            create_review(db, alice.id, entry.id, category, category.value.lower())

        assert len(list_reviews_for_entries(db, [entry.id])) == 3

    def test_custom_reviews_scoped_by_custom_category(self, db, alice, entry):
        gym = create_category(db, alice.id, "Gym", False, 1)
        music = create_category(db, alice.id, "Music", False, 2)

        create_review(db, alice.id, entry.id, "CUSTOM", "squats", custom_category_id=gym.id)
        create_review(db, alice.id, entry.id, "CUSTOM", "piano", custom_category_id=music.id)

        with pytest.raises(ConflictError):
            create_review(db, alice.id, entry.id, "CUSTOM", "more squats", custom_category_id=gym.id)

        assert len(list_reviews_for_entries(db, [entry.id])) == 2

    def test_custom_requires_category_id(self, db, alice, entry):
        with pytest.raises(ValidationFailedError) as exc:
            create_review(db, alice.id, entry.id, ReviewCategory.CUSTOM, "??")
        assert exc.value.code == "REVIEWS_CUSTOM_CATEGORY_REQUIRED"

    def test_custom_category_of_other_user_is_not_found(self, db, alice, bob, entry):
        foreign = create_category(db, bob.id, "Bob's", False, 1)
        with pytest.raises(NotFoundError) as exc:
            create_review(
                db,
                alice.id,
                entry.id,
                ReviewCategory.CUSTOM,
                "sneaky",
                custom_category_id=foreign.id,
            )
        assert exc.value.code == "CATEGORIES_NOT_FOUND"

    def test_entry_of_other_user_is_not_found(self, db, bob, entry):
        with pytest.raises(NotFoundError) as exc:
            create_review(db, bob.id, entry.id, ReviewCategory.WORK, "not mine")
        assert exc.value.code == "DAYS_ENTRY_NOT_FOUND"

    def test_builtin_review_drops_custom_category_id(self, db, alice, entry):
        gym = create_category(db, alice.id, "Gym", False, 1)
        review = create_review(
            db,
            alice.id,
            entry.id,
            ReviewCategory.WORK,
            "desk day",
            custom_category_id=gym.id,
        )
        assert review.custom_category_id is None


class TestStorageConstraints:
    def test_partial_index_blocks_duplicate_builtin_rows(self, db, entry):
        db.add(Review(day_entry_id=entry.id, category="WORK", content="a"))
        db.commit()
        db.add(Review(day_entry_id=entry.id, category="WORK", content="b"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_partial_index_blocks_duplicate_custom_rows(self, db, alice, entry):
        gym = create_category(db, alice.id, "Gym", False, 1)
        db.add(Review(day_entry_id=entry.id, category="CUSTOM", custom_category_id=gym.id, content="a"))
        db.commit()
        db.add(Review(day_entry_id=entry.id, category="CUSTOM", custom_category_id=gym.id, content="b"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_duplicate_past_stale_precheck_is_conflict(self, db, alice, entry, monkeypatch):
        create_review(db, alice.id, entry.id, ReviewCategory.WORK, "first")
        entry_id = entry.id
        user_id = alice.id

        # The existence check ran before the other insert landed.
        monkeypatch.setattr(reviews_services, "_review_exists", lambda *args: False)

        with pytest.raises(ConflictError) as exc:
            create_review(db, user_id, entry_id, ReviewCategory.WORK, "second")

        assert exc.value.code == "REVIEWS_ALREADY_EXISTS"
        assert exc.value.http_code == 409
        contents = [r.content for r in list_reviews_for_entries(db, [entry_id])]
        assert contents == ["first"]


class TestUpdateAndDelete:
    def test_update_content(self, db, alice, entry):
        review = create_review(db, alice.id, entry.id, ReviewCategory.WORK, "draft")
        updated = update_review(db, alice.id, review.id, "final")
        assert updated.content == "final"

    def test_same_content_still_bumps_updated_at(self, db, alice, entry):
        review = create_review(db, alice.id, entry.id, ReviewCategory.WORK, "draft")
        review.updated_at = datetime(2020, 1, 1)
        db.commit()

        updated = update_review(db, alice.id, review.id, "draft")

        assert updated.updated_at.year > 2020

    def test_ownership_goes_through_day_entry(self, db, alice, bob, entry):
        review = create_review(db, alice.id, entry.id, ReviewCategory.WORK, "mine")

        with pytest.raises(NotFoundError) as exc:
            update_review(db, bob.id, review.id, "hijacked")
        assert exc.value.code == "REVIEWS_NOT_FOUND"

        with pytest.raises(NotFoundError):
            delete_review(db, bob.id, review.id)

    def test_delete_frees_the_category(self, db, alice, entry):
        review = create_review(db, alice.id, entry.id, ReviewCategory.WORK, "v1")
        delete_review(db, alice.id, review.id)

        again = create_review(db, alice.id, entry.id, ReviewCategory.WORK, "v2")
        assert again.content == "v2"


class TestGrouping:
    def test_group_by_entry_id(self, db, alice, entry):
        other, _ = upsert_entry(db, alice.id, date(2026, 5, 2), Legend.NEUTRAL)
        create_review(db, alice.id, entry.id, ReviewCategory.WORK, "a")
        create_review(db, alice.id, entry.id, ReviewCategory.PERSONAL, "b")
        create_review(db, alice.id, other.id, ReviewCategory.WORK, "c")

        grouped = group_reviews_by_entry(list_reviews_for_entries(db, [entry.id, other.id]))

        assert sorted(grouped) == sorted([str(entry.id), str(other.id)])
        assert len(grouped[str(entry.id)]) == 2
        assert [r.content for r in grouped[str(other.id)]] == ["c"]

    def test_no_ids_no_query(self, db):
        assert list_reviews_for_entries(db, []) == []
