from datetime import datetime
from typing import Optional, Protocol, Sequence

from inkdesk.ink_requests.domain.models import (
    AssignmentQuota,
    InkRequestDetails,
    InkRequestRecord,
    NewInkRequest,
    RequestFilters,
    ReviewOutcome,
    StockSnapshot,
)


class InkRequestRepository(Protocol):
    async def get_assignment(self, user_id: int, ink_type_id: int) -> Optional[AssignmentQuota]:
        ...

    async def add_request(self, request: NewInkRequest) -> int:
        ...

    async def get_request(self, request_id: int) -> Optional[InkRequestRecord]:
        ...

    async def get_stock(self, ink_type_id: int) -> Optional[StockSnapshot]:
        ...

    async def decrement_stock(self, ink_type_id: int, amount: int, updated_at: datetime) -> bool:
        """Take ``amount`` off the stock only if at least that much is left."""
        ...

    async def mark_reviewed(self, outcome: ReviewOutcome) -> bool:
        """Apply the review only if the request is still pending."""
        ...

    async def get_request_details(self, request_id: int) -> Optional[InkRequestDetails]:
        ...

    async def list_requests(self, filters: RequestFilters) -> Sequence[InkRequestDetails]:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
