from datetime import datetime

from inkdesk.accounts.domain.models import Account
from inkdesk.accounts.infrastructure.password_hasher import BcryptPasswordHasher
from inkdesk.accounts.presentation.response_mapper import account_to_response
from inkdesk.ink_requests.domain.models import InkRequestDetails
from inkdesk.ink_requests.presentation.response_mapper import ink_request_to_response
from inkdesk.inventory.domain.models import StockLevel
from inkdesk.inventory.presentation.response_mapper import stock_level_to_response


def test_account_response_hides_password_hash():
    account = Account(
        id=1,
        username="budi",
        email="budi@example.com",
        password_hash="$2b$12$abc",
        role="user",
        created_at=datetime(2026, 1, 1, 8, 0, 0),
        updated_at=datetime(2026, 1, 1, 8, 0, 0),
    )

    response = account_to_response(account)

    assert "password_hash" not in response
    assert response["created_at"] == "2026-01-01T08:00:00"


def test_pending_request_response_has_null_review_fields():
    request = InkRequestDetails(
        id=3,
        user_id=1,
        user_username="budi",
        user_email="budi@example.com",
        ink_type_id=10,
        ink_type_name="Black Ink",
        ink_type_unit="bottle",
        requested_quantity=5,
        approved_quantity=None,
        status="pending",
        request_reason=None,
        admin_notes=None,
        reviewed_by_admin_id=None,
        reviewed_by_admin_username=None,
        requested_at=datetime(2026, 3, 2, 9, 30, 0),
        reviewed_at=None,
    )

    response = ink_request_to_response(request)

    assert response["status"] == "pending"
    assert response["approved_quantity"] is None
    assert response["reviewed_by_admin_username"] is None
    assert response["reviewed_at"] is None
    assert response["requested_at"] == "2026-03-02T09:30:00"


def test_stock_response_flags_low_stock():
    stock = StockLevel(
        id=1,
        ink_type_id=10,
        ink_type_name="Black Ink",
        ink_type_unit="bottle",
        current_stock=4,
        minimum_stock=5,
        updated_at=datetime(2026, 3, 2, 9, 30, 0),
    )

    assert stock_level_to_response(stock)["is_low"] is True


def test_bcrypt_hasher_round_trip():
    hasher = BcryptPasswordHasher()
    password_hash = hasher.hash("secret1")

    assert password_hash != "secret1"
    assert hasher.verify("secret1", password_hash) is True
    assert hasher.verify("wrong", password_hash) is False
