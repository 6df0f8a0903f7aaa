from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

REVIEW_DECISIONS = (APPROVED, REJECTED)


@dataclass(frozen=True)
class AssignmentQuota:
    user_id: int
    ink_type_id: int
    max_quantity_per_request: int


@dataclass(frozen=True)
class StockSnapshot:
    ink_type_id: int
    current_stock: int


@dataclass(frozen=True)
class InkRequestRecord:
    """The stored request row, without display fields."""

    id: int
    user_id: int
    ink_type_id: int
    requested_quantity: int
    approved_quantity: Optional[int]
    status: str
    request_reason: Optional[str]
    admin_notes: Optional[str]
    reviewed_by_admin_id: Optional[int]
    requested_at: datetime
    reviewed_at: Optional[datetime]


@dataclass(frozen=True)
class InkRequestDetails:
    id: int
    user_id: int
    user_username: str
    user_email: str
    ink_type_id: int
    ink_type_name: str
    ink_type_unit: str
    requested_quantity: int
    approved_quantity: Optional[int]
    status: str
    request_reason: Optional[str]
    admin_notes: Optional[str]
    reviewed_by_admin_id: Optional[int]
    reviewed_by_admin_username: Optional[str]
    requested_at: datetime
    reviewed_at: Optional[datetime]


@dataclass(frozen=True)
class NewInkRequest:
    user_id: int
    ink_type_id: int
    requested_quantity: int
    request_reason: Optional[str]
    requested_at: datetime


@dataclass(frozen=True)
class ReviewOutcome:
    request_id: int
    status: str
    approved_quantity: Optional[int]
    admin_notes: Optional[str]
    reviewed_by_admin_id: int
    reviewed_at: datetime


@dataclass(frozen=True)
class RequestFilters:
    user_id: Optional[int] = None
    status: Optional[str] = None
