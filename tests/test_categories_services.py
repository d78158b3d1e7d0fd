from __future__ import annotations

from datetime import date, datetime

import pytest

from archivist.core.calendar import Legend
from archivist.core.categories import services as categories_services
from archivist.core.categories.services import (
    create_category,
    delete_category,
    list_categories,
    update_category,
)
from archivist.core.days.services import get_entry, upsert_entry
from archivist.core.reviews.models import Review, ReviewCategory
from archivist.core.reviews.services import create_review
from archivist.response.response import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)

pytestmark = pytest.mark.integration


class TestCreate:
    def test_listing_is_ordered_by_slot(self, db, alice):
        create_category(db, alice.id, "Gym", False, 3)
        create_category(db, alice.id, "Family", True, 1)

        categories = list_categories(db, alice.id)

        assert [(c.order, c.name) for c in categories] == [(1, "Family"), (3, "Gym")]
        assert categories[0].is_required is True

    def test_fourth_category_is_rejected(self, db, alice):
        for order, name in enumerate(["Gym", "Family", "Reading"], start=1):
            create_category(db, alice.id, name, False, order)

        with pytest.raises(ConflictError) as exc:
            create_category(db, alice.id, "Music", False, 2)

        assert exc.value.code == "CATEGORIES_LIMIT_REACHED"
        assert exc.value.http_code == 400
        assert len(list_categories(db, alice.id)) == 3

    def test_taken_slot_is_rejected(self, db, alice):
        create_category(db, alice.id, "Gym", False, 2)
        with pytest.raises(ConflictError) as exc:
            create_category(db, alice.id, "Music", False, 2)
        assert exc.value.code == "CATEGORIES_ORDER_TAKEN"
        assert exc.value.http_code == 400

    def test_taken_slot_past_stale_precheck(self, db, alice, monkeypatch):
        create_category(db, alice.id, "Gym", False, 2)
        user_id = alice.id

        # The slot lookup ran before the other insert landed.
        monkeypatch.setattr(categories_services, "_slot_taken", lambda *args: False)

        with pytest.raises(ConflictError) as exc:
            create_category(db, user_id, "Music", False, 2)

        assert exc.value.code == "CATEGORIES_ORDER_TAKEN"
        assert exc.value.http_code == 400
        assert [c.name for c in list_categories(db, user_id)] == ["Gym"]

    def test_slots_are_per_user(self, db, alice, bob):
        create_category(db, alice.id, "Gym", False, 1)
        other = create_category(db, bob.id, "Gym", False, 1)
        assert other.user_id == bob.id

    @pytest.mark.parametrize("order", [0, 4])
    def test_order_out_of_range(self, db, alice, order):
        with pytest.raises(ValidationFailedError) as exc:
            create_category(db, alice.id, "Gym", False, order)
        assert exc.value.code == "CATEGORIES_INVALID_ORDER"


class TestUpdate:
    def test_partial_update_keeps_order(self, db, alice):
        category = create_category(db, alice.id, "Gym", False, 2)

        renamed = update_category(db, alice.id, category.id, name="Running")
        assert renamed.name == "Running"
        assert renamed.is_required is False
        assert renamed.order == 2

        required = update_category(db, alice.id, category.id, is_required=True)
        assert required.name == "Running"
        assert required.is_required is True

    def test_same_name_still_bumps_updated_at(self, db, alice):
        category = create_category(db, alice.id, "Gym", False, 1)
        category.updated_at = datetime(2020, 1, 1)
        db.commit()

        updated = update_category(db, alice.id, category.id, name="Gym")

        assert updated.updated_at.year > 2020

    def test_other_users_category_is_not_found(self, db, alice, bob):
        category = create_category(db, alice.id, "Gym", False, 1)
        with pytest.raises(NotFoundError):
            update_category(db, bob.id, category.id, name="Mine now")
        with pytest.raises(NotFoundError):
            delete_category(db, bob.id, category.id)


class TestDelete:
    def test_delete_cascades_and_slot_reuse_starts_empty(self, db, alice):
        category = create_category(db, alice.id, "Gym", False, 1)
        old_id = category.id
        entry, _ = upsert_entry(db, alice.id, date(2026, 3, 3), Legend.GOOD_DAY)
        entry_id = entry.id
        create_review(
            db,
            alice.id,
            entry_id,
            ReviewCategory.CUSTOM,
            "leg day",
            custom_category_id=old_id,
        )
        create_review(db, alice.id, entry_id, ReviewCategory.WORK, "deploy")

        delete_category(db, alice.id, old_id)

        assert db.query(Review).filter(Review.custom_category_id == old_id).count() == 0

        replacement = create_category(db, alice.id, "Swimming", False, 1)
        assert replacement.id != old_id

        _, reviews = get_entry(db, alice.id, date(2026, 3, 3))
        assert [r.category for r in reviews] == ["WORK"]
        assert all(r.custom_category_id != replacement.id for r in reviews)
