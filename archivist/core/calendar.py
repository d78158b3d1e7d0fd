from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, Tuple

from archivist.core.config import settings
from archivist.response.response import ValidationFailedError


class Legend(str, Enum):
    """Day moods, ordered from best to worst."""

    CORE_MEMORY = "CORE_MEMORY"
    GOOD_DAY = "GOOD_DAY"
    NEUTRAL = "NEUTRAL"
    BAD_DAY = "BAD_DAY"
    NIGHTMARE = "NIGHTMARE"


GOOD_LEGENDS = frozenset({Legend.CORE_MEMORY.value, Legend.GOOD_DAY.value})

LEGEND_CONFIG: Dict[Legend, dict] = {
    Legend.CORE_MEMORY: {
        "label": "Core Memory",
        "color": "#22D3EE",
        "text_color": "#083344",
        "valence": 2,
    },
    Legend.GOOD_DAY: {
        "label": "A Good Day",
        "color": "#22C55E",
        "text_color": "#052e16",
        "valence": 1,
    },
    Legend.NEUTRAL: {
        "label": "Neutral",
        "color": "#FACC15",
        "text_color": "#422006",
        "valence": 0,
    },
    Legend.BAD_DAY: {
        "label": "A Bad Day",
        "color": "#FB923C",
        "text_color": "#431407",
        "valence": -1,
    },
    Legend.NIGHTMARE: {
        "label": "Nightmare",
        "color": "#EF4444",
        "text_color": "#450a0a",
        "valence": -2,
    },
}


def today() -> date:
    return date.today()


def year_bounds(year: int | None = None) -> Tuple[date, date]:
    target = year or settings.calendar_year
    return date(target, 1, 1), date(target, 12, 31)


def ensure_supported_year(year: int) -> int:
    if year != settings.calendar_year:
        raise ValidationFailedError(
            code="DAYS_UNSUPPORTED_YEAR",
            message=f"Only year {settings.calendar_year} is supported",
            fields={"year": [f"Must be {settings.calendar_year}"]},
        )
    return year


def validate_entry_date(value: date, *, current_day: date | None = None) -> date:
    """
    Entries may only be written for days of the configured year that are
    not after today.
    """
    if value.year != settings.calendar_year:
        raise ValidationFailedError(
            code="DAYS_INVALID_YEAR",
            message=f"Date must be in year {settings.calendar_year}",
            fields={"date": [f"Date must be in year {settings.calendar_year}"]},
        )

    reference = current_day or today()
    if value > reference:
        raise ValidationFailedError(
            code="DAYS_FUTURE_DATE",
            message="Cannot create entries for future dates",
            fields={"date": ["Cannot create entries for future dates"]},
        )
    return value


def is_good_day(legend: str) -> bool:
    return legend in GOOD_LEGENDS


__all__ = [
    "Legend",
    "GOOD_LEGENDS",
    "LEGEND_CONFIG",
    "today",
    "year_bounds",
    "ensure_supported_year",
    "validate_entry_date",
    "is_good_day",
]
