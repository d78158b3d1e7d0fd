from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from archivist.core.auth.api.v1.routes_auth import router as auth_router
from archivist.core.auth.api.v1.routes_me import router as me_router
from archivist.core.categories.api.v1.routes_categories import (
    router as categories_router,
)
from archivist.core.config import settings
from archivist.core.days.api.v1.routes_days import router as days_router
from archivist.core.legends.api.v1.routes_legends import router as legends_router
from archivist.core.profile.api.v1.routes_profile import router as profile_router
from archivist.core.reviews.api.v1.routes_reviews import router as reviews_router
from archivist.database.session import SessionLocal
from archivist.response import StandardResponse, make_error_response
from archivist.response.response import APIError
from archivist.utils.redis_client import get_redis


logger = logging.getLogger(__name__)

app = FastAPI()
app.title = "Archivist API"
app.version = "1.0.0"

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=True,
)


@app.exception_handler(APIError)
async def api_error_handler(
    request: Request,
    exc: APIError,
) -> JSONResponse:
    response: StandardResponse = make_error_response(
        code=exc.code,
        http_code=exc.http_code,
        message=exc.message,
        details=exc.details,
        fields=exc.fields,
    )
    return JSONResponse(
        status_code=exc.http_code,
        content=jsonable_encoder(response),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    fields: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        key = ".".join(location) or "__root__"
        fields.setdefault(key, []).append(error.get("msg", "Invalid value"))

    response = make_error_response(
        code="VALIDATION_ERROR",
        http_code=400,
        message="Validation error",
        fields=fields,
    )
    return JSONResponse(status_code=400, content=jsonable_encoder(response))


@app.exception_handler(Exception)
async def unhandled_error_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.exception(
        "unhandled error on %s %s", request.method, request.url.path
    )
    response = make_error_response(
        code="INTERNAL_ERROR",
        http_code=500,
        message="An unexpected error occurred",
    )
    return JSONResponse(status_code=500, content=jsonable_encoder(response))


@app.get("/api/v1/health", include_in_schema=False)
def health() -> Dict[str, Any]:
    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception as exc:
        logger.warning("health check: database unavailable: %r", exc)
    finally:
        db.close()

    redis_ok = False
    try:
        get_redis().ping()
        redis_ok = True
    except Exception as exc:
        logger.warning("health check: redis unavailable: %r", exc)

    return {
        "message": "OK! API is running",
        "database": db_ok,
        "redis": redis_ok,
    }


app.include_router(auth_router, prefix="/api/v1")
app.include_router(me_router, prefix="/api/v1")
app.include_router(legends_router, prefix="/api/v1")
app.include_router(days_router, prefix="/api/v1")
app.include_router(reviews_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(profile_router, prefix="/api/v1")


__all__ = ["app"]
