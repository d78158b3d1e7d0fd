from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter

from archivist.core.calendar import LEGEND_CONFIG
from archivist.core.config import settings
from archivist.core.reviews.models import ReviewCategory
from archivist.response import StandardResponse, make_success_response


router = APIRouter(prefix="/legends", tags=["legends"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="Legend catalogue and built-in review categories",
)
def list_legends_view() -> StandardResponse:
    """
    Static reference data for clients: legends from best to worst, the
    built-in review categories and the supported year.
    """
    legends: List[Dict] = [
        {
            "value": legend.value,
            "label": meta["label"],
            "color": meta["color"],
            "textColor": meta["text_color"],
            "valence": meta["valence"],
        }
        for legend, meta in LEGEND_CONFIG.items()
    ]
    categories = [
        {"value": c.value, "label": c.value.capitalize()}
        for c in ReviewCategory
        if c != ReviewCategory.CUSTOM
    ]
    return make_success_response(
        result={
            "year": settings.calendar_year,
            "legends": legends,
            "categories": categories,
        }
    )


__all__ = ["router"]
