from __future__ import annotations

import logging
from datetime import date
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import asc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archivist.core.calendar import Legend, validate_entry_date, year_bounds
from archivist.core.days.models import DayEntry
from archivist.core.reviews.models import Review
from archivist.core.reviews.services import list_reviews_for_entries
from archivist.response.response import ConflictError, NotFoundError


logger = logging.getLogger(__name__)


def _entry_not_found() -> NotFoundError:
    return NotFoundError(
        code="DAYS_ENTRY_NOT_FOUND",
        message="Day entry not found",
    )


def _find_entry(db: Session, user_id: UUID, entry_date: date) -> DayEntry | None:
    return (
        db.query(DayEntry)
        .filter(DayEntry.user_id == user_id, DayEntry.date == entry_date)
        .first()
    )


def list_year_entries(
    db: Session,
    user_id: UUID,
    year: int | None = None,
) -> List[DayEntry]:
    start, end = year_bounds(year)
    return (
        db.query(DayEntry)
        .filter(
            DayEntry.user_id == user_id,
            DayEntry.date >= start,
            DayEntry.date <= end,
        )
        .order_by(asc(DayEntry.date))
        .all()
    )


def get_year_entries(
    db: Session,
    user_id: UUID,
    year: int | None = None,
) -> Tuple[List[DayEntry], List[Review]]:
    entries = list_year_entries(db, user_id, year)
    reviews = list_reviews_for_entries(db, [e.id for e in entries])
    return entries, reviews


def get_entry(
    db: Session,
    user_id: UUID,
    entry_date: date,
) -> Tuple[DayEntry, List[Review]]:
    entry = _find_entry(db, user_id, entry_date)
    if entry is None:
        raise _entry_not_found()
    return entry, list_reviews_for_entries(db, [entry.id])


def _set_legend(db: Session, entry: DayEntry, legend: Legend) -> DayEntry:
    entry.legend = legend.value
    # onupdate only fires when a column changes; resubmits still bump it.
    entry.updated_at = func.now()
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def upsert_entry(
    db: Session,
    user_id: UUID,
    entry_date: date,
    legend: Legend | str,
    *,
    current_day: date | None = None,
) -> Tuple[DayEntry, bool]:
    """
    Creates the entry for `entry_date` or rewrites its legend.

    Returns the entry and whether it was created. A concurrent insert for
    the same day loses on the unique constraint and falls back to
    updating the winner's row.
    """
    legend = Legend(legend)
    validate_entry_date(entry_date, current_day=current_day)

    existing = _find_entry(db, user_id, entry_date)
    if existing is not None:
        return _set_legend(db, existing, legend), False

    entry = DayEntry(user_id=user_id, date=entry_date, legend=legend.value)
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(
            "day entry insert lost race, updating instead (user_id=%s, date=%s)",
            user_id,
            entry_date,
        )
        winner = _find_entry(db, user_id, entry_date)
        if winner is None:
            raise ConflictError(
                code="DAYS_ENTRY_CONFLICT",
                message="Day entry was modified concurrently, please retry",
            )
        return _set_legend(db, winner, legend), False

    db.refresh(entry)
    return entry, True


def update_legend(
    db: Session,
    user_id: UUID,
    entry_date: date,
    legend: Legend | str,
) -> DayEntry:
    legend = Legend(legend)
    entry = _find_entry(db, user_id, entry_date)
    if entry is None:
        raise _entry_not_found()
    return _set_legend(db, entry, legend)


def delete_entry(db: Session, user_id: UUID, entry_date: date) -> None:
    entry = _find_entry(db, user_id, entry_date)
    if entry is None:
        raise _entry_not_found()

    # Reviews go with the entry.
    db.delete(entry)
    db.commit()


__all__ = [
    "list_year_entries",
    "get_year_entries",
    "get_entry",
    "upsert_entry",
    "update_legend",
    "delete_entry",
]
