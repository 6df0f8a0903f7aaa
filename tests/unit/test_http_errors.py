import pytest

from inkdesk.common.errors import (
    AlreadyReviewed,
    Conflict,
    InsufficientStock,
    InvalidRequest,
    NotFound,
    PermissionDenied,
    QuotaExceeded,
)
from routes.http_errors import to_http_exception


@pytest.mark.parametrize("error,status_code", [
    (NotFound, 404),
    (PermissionDenied, 403),
    (Conflict, 409),
    (AlreadyReviewed, 409),
    (QuotaExceeded, 400),
    (InsufficientStock, 400),
    (InvalidRequest, 400),
])
def test_domain_errors_map_to_status_codes(error, status_code):
    exc = to_http_exception(error("something went wrong"))

    assert exc.status_code == status_code
    assert exc.detail == "something went wrong"
