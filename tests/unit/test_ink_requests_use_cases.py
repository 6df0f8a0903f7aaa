import asyncio
import copy
from dataclasses import replace
from datetime import datetime

import pytest

from inkdesk.common.errors import (
    AlreadyReviewed,
    InsufficientStock,
    InvalidRequest,
    NotFound,
    PermissionDenied,
    QuotaExceeded,
)
from inkdesk.ink_requests.application.use_cases import (
    GetInkRequestUseCase,
    ListInkRequestsQuery,
    ListInkRequestsUseCase,
    ReviewInkRequestCommand,
    ReviewInkRequestUseCase,
    SubmitInkRequestCommand,
    SubmitInkRequestUseCase,
)
from inkdesk.ink_requests.domain.models import (
    AssignmentQuota,
    InkRequestDetails,
    InkRequestRecord,
    StockSnapshot,
)

NOW = datetime(2026, 3, 2, 9, 30, 0)
LATER = datetime(2026, 3, 2, 11, 0, 0)

USER_ID = 1
ADMIN_ID = 2
BLACK_INK = 10


class FakeInkRequestRepository:
    def __init__(self) -> None:
        self.users = {
            USER_ID: ("budi", "budi@example.com"),
            ADMIN_ID: ("admin", "admin@example.com"),
        }
        self.ink_types = {BLACK_INK: ("Black Ink", "bottle")}
        self.assignments = {}
        self.stock = {}
        self.requests = {}
        self.next_id = 1
        self.commits = 0
        self.rollbacks = 0
        self._committed_state = self._state()

    def _state(self):
        return copy.deepcopy((self.stock, self.requests, self.next_id))

    async def get_assignment(self, user_id, ink_type_id):
        max_quantity = self.assignments.get((user_id, ink_type_id))
        if max_quantity is None:
            return None
        return AssignmentQuota(user_id, ink_type_id, max_quantity)

    async def add_request(self, request):
        request_id = self.next_id
        self.next_id += 1
        self.requests[request_id] = InkRequestRecord(
            id=request_id,
            user_id=request.user_id,
            ink_type_id=request.ink_type_id,
            requested_quantity=request.requested_quantity,
            approved_quantity=None,
            status="pending",
            request_reason=request.request_reason,
            admin_notes=None,
            reviewed_by_admin_id=None,
            requested_at=request.requested_at,
            reviewed_at=None,
        )
        return request_id

    async def get_request(self, request_id):
        return self.requests.get(request_id)

    async def get_stock(self, ink_type_id):
        if ink_type_id not in self.stock:
            return None
        return StockSnapshot(ink_type_id, self.stock[ink_type_id])

    async def decrement_stock(self, ink_type_id, amount, updated_at):
        current = self.stock.get(ink_type_id)
        if current is None or current < amount:
            return False
        self.stock[ink_type_id] = current - amount
        return True

    async def mark_reviewed(self, outcome):
        record = self.requests.get(outcome.request_id)
        if record is None or record.status != "pending":
            return False
        self.requests[outcome.request_id] = replace(
            record,
            status=outcome.status,
            approved_quantity=outcome.approved_quantity,
            admin_notes=outcome.admin_notes,
            reviewed_by_admin_id=outcome.reviewed_by_admin_id,
            reviewed_at=outcome.reviewed_at,
        )
        return True

    def _details(self, record):
        username, email = self.users[record.user_id]
        name, unit = self.ink_types[record.ink_type_id]
        reviewer = None
        if record.reviewed_by_admin_id is not None:
            reviewer = self.users[record.reviewed_by_admin_id][0]
        return InkRequestDetails(
            id=record.id,
            user_id=record.user_id,
            user_username=username,
            user_email=email,
            ink_type_id=record.ink_type_id,
            ink_type_name=name,
            ink_type_unit=unit,
            requested_quantity=record.requested_quantity,
            approved_quantity=record.approved_quantity,
            status=record.status,
            request_reason=record.request_reason,
            admin_notes=record.admin_notes,
            reviewed_by_admin_id=record.reviewed_by_admin_id,
            reviewed_by_admin_username=reviewer,
            requested_at=record.requested_at,
            reviewed_at=record.reviewed_at,
        )

    async def get_request_details(self, request_id):
        record = self.requests.get(request_id)
        if record is None:
            return None
        return self._details(record)

    async def list_requests(self, filters):
        records = [
            record
            for record in self.requests.values()
            if (filters.user_id is None or record.user_id == filters.user_id)
            and (filters.status is None or record.status == filters.status)
        ]
        records.sort(key=lambda record: (record.requested_at, record.id), reverse=True)
        return [self._details(record) for record in records]

    async def commit(self):
        self.commits += 1
        self._committed_state = self._state()

    async def rollback(self):
        self.rollbacks += 1
        self.stock, self.requests, self.next_id = copy.deepcopy(self._committed_state)


class RacingRepository(FakeInkRequestRepository):
    """Another reviewer commits between our read-checks and our writes."""

    def __init__(self, interference) -> None:
        super().__init__()
        self.interference = interference

    async def mark_reviewed(self, outcome):
        self.interference(self)
        return await super().mark_reviewed(outcome)


def run(coro):
    return asyncio.run(coro)


def submit(repo, quantity, user_id=USER_ID, ink_type_id=BLACK_INK, reason="printer empty"):
    use_case = SubmitInkRequestUseCase(repository=repo, clock=lambda: NOW)
    command = SubmitInkRequestCommand(
        ink_type_id=ink_type_id,
        requested_quantity=quantity,
        request_reason=reason,
    )
    return run(use_case.execute(command, user_id))


def review(repo, request_id, status, approved_quantity=None, notes=None):
    use_case = ReviewInkRequestUseCase(repository=repo, clock=lambda: LATER)
    command = ReviewInkRequestCommand(
        request_id=request_id,
        status=status,
        admin_notes=notes,
        approved_quantity=approved_quantity,
    )
    return run(use_case.execute(command, ADMIN_ID))


@pytest.fixture
def repo():
    repository = FakeInkRequestRepository()
    repository.assignments[(USER_ID, BLACK_INK)] = 10
    repository.stock[BLACK_INK] = 100
    return repository


# ==================== SUBMIT ====================

def test_submit_creates_pending_request_with_details(repo):
    request = submit(repo, 5)

    assert request.status == "pending"
    assert request.requested_quantity == 5
    assert request.approved_quantity is None
    assert request.reviewed_by_admin_id is None
    assert request.reviewed_by_admin_username is None
    assert request.reviewed_at is None
    assert request.user_username == "budi"
    assert request.user_email == "budi@example.com"
    assert request.ink_type_name == "Black Ink"
    assert request.ink_type_unit == "bottle"
    assert request.request_reason == "printer empty"
    assert request.requested_at == NOW
    assert repo.commits == 1


def test_submit_without_assignment_is_denied(repo):
    with pytest.raises(PermissionDenied):
        submit(repo, 1, ink_type_id=99)

    assert repo.requests == {}


def test_submit_for_other_users_assignment_is_denied(repo):
    with pytest.raises(PermissionDenied):
        submit(repo, 1, user_id=ADMIN_ID)

    assert repo.requests == {}


def test_submit_above_quota_writes_nothing(repo):
    with pytest.raises(QuotaExceeded):
        submit(repo, 15)

    assert repo.requests == {}
    assert repo.commits == 0


def test_submit_exactly_at_quota_is_allowed(repo):
    request = submit(repo, 10)

    assert request.requested_quantity == 10


@pytest.mark.parametrize("quantity", [0, -3])
def test_submit_rejects_non_positive_quantity(repo, quantity):
    with pytest.raises(InvalidRequest):
        submit(repo, quantity)

    assert repo.requests == {}


def test_submit_with_no_reason(repo):
    request = submit(repo, 2, reason=None)

    assert request.request_reason is None


# ==================== REVIEW ====================

def test_approve_defaults_to_requested_quantity(repo):
    request = submit(repo, 5)

    reviewed = review(repo, request.id, "approved")

    assert reviewed.status == "approved"
    assert reviewed.approved_quantity == 5
    assert repo.stock[BLACK_INK] == 95
    assert reviewed.reviewed_by_admin_id == ADMIN_ID
    assert reviewed.reviewed_by_admin_username == "admin"
    assert reviewed.reviewed_at == LATER


def test_approve_with_smaller_quantity(repo):
    request = submit(repo, 5)

    reviewed = review(repo, request.id, "approved", approved_quantity=3, notes="partial")

    assert reviewed.approved_quantity == 3
    assert reviewed.admin_notes == "partial"
    assert repo.stock[BLACK_INK] == 97


def test_approve_with_explicit_zero_is_not_the_default(repo):
    request = submit(repo, 5)

    reviewed = review(repo, request.id, "approved", approved_quantity=0)

    assert reviewed.status == "approved"
    assert reviewed.approved_quantity == 0
    assert repo.stock[BLACK_INK] == 100


def test_approve_with_insufficient_stock_changes_nothing(repo):
    repo.stock[BLACK_INK] = 2
    request = submit(repo, 5)

    with pytest.raises(InsufficientStock):
        review(repo, request.id, "approved")

    assert repo.stock[BLACK_INK] == 2
    assert repo.requests[request.id].status == "pending"
    assert repo.requests[request.id].approved_quantity is None


def test_approve_entire_remaining_stock(repo):
    repo.stock[BLACK_INK] = 5
    request = submit(repo, 5)

    review(repo, request.id, "approved")

    assert repo.stock[BLACK_INK] == 0


def test_approve_above_requested_is_still_bounded_by_stock(repo):
    repo.stock[BLACK_INK] = 8
    request = submit(repo, 5)

    with pytest.raises(InsufficientStock):
        review(repo, request.id, "approved", approved_quantity=9)

    assert repo.stock[BLACK_INK] == 8


def test_approve_without_stock_record(repo):
    del repo.stock[BLACK_INK]
    request = submit(repo, 5)

    with pytest.raises(NotFound):
        review(repo, request.id, "approved")

    assert repo.requests[request.id].status == "pending"


def test_reject_leaves_stock_and_approved_quantity_alone(repo):
    request = submit(repo, 5)

    reviewed = review(repo, request.id, "rejected", approved_quantity=4, notes="not this month")

    assert reviewed.status == "rejected"
    assert reviewed.approved_quantity is None
    assert reviewed.admin_notes == "not this month"
    assert reviewed.reviewed_by_admin_username == "admin"
    assert repo.stock[BLACK_INK] == 100


def test_reject_does_not_need_stock_record(repo):
    del repo.stock[BLACK_INK]
    request = submit(repo, 5)

    reviewed = review(repo, request.id, "rejected")

    assert reviewed.status == "rejected"


def test_review_unknown_request(repo):
    with pytest.raises(NotFound):
        review(repo, 404, "approved")


@pytest.mark.parametrize("first,second", [
    ("approved", "rejected"),
    ("approved", "approved"),
    ("rejected", "approved"),
    ("rejected", "rejected"),
])
def test_second_review_is_refused(repo, first, second):
    request = submit(repo, 5)
    review(repo, request.id, first)
    stock_after_first = repo.stock[BLACK_INK]

    with pytest.raises(AlreadyReviewed):
        review(repo, request.id, second)

    assert repo.requests[request.id].status == first
    assert repo.stock[BLACK_INK] == stock_after_first


def test_review_rejects_unknown_decision(repo):
    request = submit(repo, 5)

    with pytest.raises(InvalidRequest):
        review(repo, request.id, "pending")


def test_review_rejects_negative_approved_quantity(repo):
    request = submit(repo, 5)

    with pytest.raises(InvalidRequest):
        review(repo, request.id, "approved", approved_quantity=-1)

    assert repo.stock[BLACK_INK] == 100


def test_concurrent_review_loses_cleanly():
    def other_reviewer(repository):
        record = repository.requests[1]
        repository.requests[1] = replace(record, status="rejected", reviewed_by_admin_id=ADMIN_ID)
        repository._committed_state = repository._state()

    repo = RacingRepository(other_reviewer)
    repo.assignments[(USER_ID, BLACK_INK)] = 10
    repo.stock[BLACK_INK] = 100
    request = submit(repo, 5)

    with pytest.raises(AlreadyReviewed):
        review(repo, request.id, "approved")

    assert repo.requests[request.id].status == "rejected"
    assert repo.stock[BLACK_INK] == 100
    assert repo.rollbacks == 1


def test_concurrent_stock_drain_rolls_back_review():
    def other_approval(repository):
        repository.stock[BLACK_INK] = 1
        repository._committed_state = repository._state()

    repo = RacingRepository(other_approval)
    repo.assignments[(USER_ID, BLACK_INK)] = 10
    repo.stock[BLACK_INK] = 100
    request = submit(repo, 5)

    with pytest.raises(InsufficientStock):
        review(repo, request.id, "approved")

    assert repo.requests[request.id].status == "pending"
    assert repo.stock[BLACK_INK] == 1
    assert repo.rollbacks == 1


# ==================== READS ====================

def test_get_request_returns_none_when_absent(repo):
    use_case = GetInkRequestUseCase(repo)

    assert run(use_case.execute(12345)) is None


def test_get_request_includes_reviewer_username(repo):
    request = submit(repo, 5)
    review(repo, request.id, "approved")

    found = run(GetInkRequestUseCase(repo).execute(request.id))

    assert found.reviewed_by_admin_username == "admin"
    assert found.approved_quantity == 5


def test_list_filters(repo):
    repo.assignments[(ADMIN_ID, BLACK_INK)] = 10
    first = submit(repo, 1)
    second = submit(repo, 2, user_id=ADMIN_ID)
    review(repo, first.id, "approved")

    use_case = ListInkRequestsUseCase(repo)

    everything = run(use_case.execute(ListInkRequestsQuery()))
    mine = run(use_case.execute(ListInkRequestsQuery(user_id=USER_ID)))
    pending = run(use_case.execute(ListInkRequestsQuery(status="pending")))

    assert {req.id for req in everything} == {first.id, second.id}
    assert [req.id for req in mine] == [first.id]
    assert [req.id for req in pending] == [second.id]
    assert pending[0].reviewed_by_admin_username is None


def test_list_is_empty_without_requests(repo):
    use_case = ListInkRequestsUseCase(repo)

    assert list(run(use_case.execute(ListInkRequestsQuery()))) == []
    assert list(run(use_case.execute(ListInkRequestsQuery(user_id=USER_ID)))) == []
    assert list(run(use_case.execute(ListInkRequestsQuery(status="pending")))) == []


def test_list_rejects_unknown_status(repo):
    with pytest.raises(InvalidRequest):
        run(ListInkRequestsUseCase(repo).execute(ListInkRequestsQuery(status="archived")))
