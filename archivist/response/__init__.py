from .response import (
    APIError,
    ConflictError,
    ErrorPayload,
    Meta,
    NotFoundError,
    Pagination,
    StandardResponse,
    UnauthenticatedError,
    ValidationFailedError,
    make_error_response,
    make_success_response,
)

__all__ = [
    "APIError",
    "UnauthenticatedError",
    "ValidationFailedError",
    "NotFoundError",
    "ConflictError",
    "Pagination",
    "Meta",
    "ErrorPayload",
    "StandardResponse",
    "make_success_response",
    "make_error_response",
]
