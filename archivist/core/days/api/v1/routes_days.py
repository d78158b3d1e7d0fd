from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from archivist.core.auth.models import User
from archivist.core.calendar import ensure_supported_year
from archivist.core.days.schemas import (
    DayEntryCreate,
    DayEntryPublic,
    DayEntryUpdate,
)
from archivist.core.days.services import (
    delete_entry,
    get_entry,
    get_year_entries,
    update_legend,
    upsert_entry,
)
from archivist.core.dependencies import get_current_user, get_db
from archivist.core.profile.services import invalidate_public_view
from archivist.core.reviews.schemas import ReviewPublic
from archivist.response import StandardResponse, make_success_response


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
router = APIRouter(prefix="/days", tags=["days"])


@router.get(
    "/{year:int}",
    response_model=StandardResponse,
    summary="All entries of the year with their reviews",
)
def list_year_view(
    year: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    ensure_supported_year(year)
    entries, reviews = get_year_entries(db, user.id, year)
    result = {
        "entries": [DayEntryPublic.model_validate(e).to_json() for e in entries],
        "reviews": [ReviewPublic.model_validate(r).to_json() for r in reviews],
    }
    return make_success_response(result=result)


@router.get(
    "/{entry_date}",
    response_model=StandardResponse,
    summary="One day entry with its reviews",
)
def get_entry_view(
    entry_date: date,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    entry, reviews = get_entry(db, user.id, entry_date)
    result = {
        "entry": DayEntryPublic.model_validate(entry).to_json(),
        "reviews": [ReviewPublic.model_validate(r).to_json() for r in reviews],
    }
    return make_success_response(result=result)


@router.post(
    "",
    response_model=StandardResponse,
    summary="Create or update the entry for a day",
)
def upsert_entry_view(
    payload: DayEntryCreate,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    """
    Creates the entry (201) or, if the day already has one, replaces its
    legend (200).
    """
    entry, created = upsert_entry(db, user.id, payload.date, payload.legend)
    invalidate_public_view(user.id)
    logger.info(
        "day entry %s (user_id=%s, date=%s)",
        "created" if created else "updated",
        user.id,
        entry.date,
    )

    response.status_code = 201 if created else 200
    return make_success_response(
        result={"entry": DayEntryPublic.model_validate(entry).to_json()}
    )


@router.put(
    "/{entry_date}",
    response_model=StandardResponse,
    summary="Change the legend of an existing entry",
)
def update_entry_view(
    entry_date: date,
    payload: DayEntryUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    entry = update_legend(db, user.id, entry_date, payload.legend)
    invalidate_public_view(user.id)
    return make_success_response(
        result={"entry": DayEntryPublic.model_validate(entry).to_json()}
    )


@router.delete(
    "/{entry_date}",
    response_model=StandardResponse,
    summary="Delete an entry and its reviews",
)
def delete_entry_view(
    entry_date: date,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    delete_entry(db, user.id, entry_date)
    invalidate_public_view(user.id)
    logger.info("day entry deleted (user_id=%s, date=%s)", user.id, entry_date)
    return make_success_response(result={"success": True})


__all__ = ["router"]
