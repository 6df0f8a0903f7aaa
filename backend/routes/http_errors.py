"""
Translate domain errors raised by use cases into HTTP errors
"""
from fastapi import HTTPException

from inkdesk.common.errors import (
    AlreadyReviewed,
    Conflict,
    DomainError,
    InsufficientStock,
    InvalidRequest,
    NotFound,
    PermissionDenied,
    QuotaExceeded,
)

STATUS_BY_ERROR = {
    NotFound: 404,
    PermissionDenied: 403,
    Conflict: 409,
    AlreadyReviewed: 409,
    QuotaExceeded: 400,
    InsufficientStock: 400,
    InvalidRequest: 400,
}


def to_http_exception(exc: DomainError) -> HTTPException:
    status_code = STATUS_BY_ERROR.get(type(exc), 400)
    return HTTPException(status_code=status_code, detail=exc.message)
