from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence
import logging

from inkdesk.common.errors import (
    AlreadyReviewed,
    InsufficientStock,
    InvalidRequest,
    NotFound,
    PermissionDenied,
    QuotaExceeded,
)
from inkdesk.ink_requests.application.ports import InkRequestRepository
from inkdesk.ink_requests.domain.models import (
    APPROVED,
    PENDING,
    REJECTED,
    REVIEW_DECISIONS,
    InkRequestDetails,
    NewInkRequest,
    RequestFilters,
    ReviewOutcome,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class SubmitInkRequestCommand:
    ink_type_id: int
    requested_quantity: int
    request_reason: Optional[str] = None


@dataclass(frozen=True)
class ReviewInkRequestCommand:
    request_id: int
    status: str
    admin_notes: Optional[str] = None
    # None means the reviewer did not give a quantity; 0 is an explicit value.
    approved_quantity: Optional[int] = None


@dataclass(frozen=True)
class ListInkRequestsQuery:
    user_id: Optional[int] = None
    status: Optional[str] = None


class SubmitInkRequestUseCase:
    def __init__(self, repository: InkRequestRepository, clock: Clock) -> None:
        self._repository = repository
        self._clock = clock

    async def execute(self, command: SubmitInkRequestCommand, user_id: int) -> InkRequestDetails:
        if command.requested_quantity <= 0:
            raise InvalidRequest("Requested quantity must be greater than zero")

        assignment = await self._repository.get_assignment(user_id, command.ink_type_id)
        if assignment is None:
            logger.warning(
                f"User {user_id} tried to request unassigned ink type {command.ink_type_id}"
            )
            raise PermissionDenied("User is not assigned to request this ink type")

        if command.requested_quantity > assignment.max_quantity_per_request:
            logger.warning(
                f"User {user_id} requested {command.requested_quantity} of ink type "
                f"{command.ink_type_id}, cap is {assignment.max_quantity_per_request}"
            )
            raise QuotaExceeded("Requested quantity exceeds maximum allowed per request")

        request_id = await self._repository.add_request(
            NewInkRequest(
                user_id=user_id,
                ink_type_id=command.ink_type_id,
                requested_quantity=command.requested_quantity,
                request_reason=command.request_reason,
                requested_at=self._clock(),
            )
        )
        await self._repository.commit()
        logger.info(f"Ink request {request_id} submitted by user {user_id}")

        details = await self._repository.get_request_details(request_id)
        if details is None:
            raise NotFound("Ink request not found")
        return details


class ReviewInkRequestUseCase:
    """
    Approve or reject a pending request.

    Approval takes the approved quantity off the ink type's stock. Both writes
    are conditional (request still pending, stock still sufficient) and share
    one transaction, so a concurrent reviewer gets AlreadyReviewed or
    InsufficientStock instead of double-spending stock.
    """

    def __init__(self, repository: InkRequestRepository, clock: Clock) -> None:
        self._repository = repository
        self._clock = clock

    async def execute(self, command: ReviewInkRequestCommand, reviewer_id: int) -> InkRequestDetails:
        if command.status not in REVIEW_DECISIONS:
            raise InvalidRequest("Review status must be 'approved' or 'rejected'")
        if command.approved_quantity is not None and command.approved_quantity < 0:
            raise InvalidRequest("Approved quantity cannot be negative")

        request = await self._repository.get_request(command.request_id)
        if request is None:
            raise NotFound("Ink request not found")

        if request.status != PENDING:
            raise AlreadyReviewed("Request has already been reviewed")

        approved_quantity = None
        if command.status == APPROVED:
            stock = await self._repository.get_stock(request.ink_type_id)
            if stock is None:
                raise NotFound("No stock information found for this ink type")

            if command.approved_quantity is not None:
                approved_quantity = command.approved_quantity
            else:
                approved_quantity = request.requested_quantity

            if approved_quantity > stock.current_stock:
                logger.warning(
                    f"Request {request.id} needs {approved_quantity}, "
                    f"only {stock.current_stock} in stock"
                )
                raise InsufficientStock("Insufficient stock available")

        now = self._clock()
        outcome = ReviewOutcome(
            request_id=request.id,
            status=command.status,
            approved_quantity=approved_quantity,
            admin_notes=command.admin_notes,
            reviewed_by_admin_id=reviewer_id,
            reviewed_at=now,
        )

        if not await self._repository.mark_reviewed(outcome):
            await self._repository.rollback()
            raise AlreadyReviewed("Request has already been reviewed")

        if approved_quantity is not None:
            decremented = await self._repository.decrement_stock(
                request.ink_type_id, approved_quantity, now
            )
            if not decremented:
                await self._repository.rollback()
                raise InsufficientStock("Insufficient stock available")

        await self._repository.commit()
        logger.info(
            f"Ink request {request.id} {command.status} by admin {reviewer_id}"
            + (f" ({approved_quantity} taken from stock)" if approved_quantity is not None else "")
        )

        details = await self._repository.get_request_details(request.id)
        if details is None:
            raise NotFound("Ink request not found")
        return details


class ListInkRequestsUseCase:
    def __init__(self, repository: InkRequestRepository) -> None:
        self._repository = repository

    async def execute(self, query: ListInkRequestsQuery) -> Sequence[InkRequestDetails]:
        if query.status is not None and query.status not in (PENDING, APPROVED, REJECTED):
            raise InvalidRequest(f"Unknown request status: {query.status}")
        return await self._repository.list_requests(
            RequestFilters(user_id=query.user_id, status=query.status)
        )


class GetInkRequestUseCase:
    def __init__(self, repository: InkRequestRepository) -> None:
        self._repository = repository

    async def execute(self, request_id: int) -> Optional[InkRequestDetails]:
        return await self._repository.get_request_details(request_id)
