from typing import Optional, Protocol, Sequence

from inkdesk.assignments.domain.models import AssignmentDetails


class AssignmentRepository(Protocol):
    async def user_exists(self, user_id: int) -> bool:
        ...

    async def ink_type_exists(self, ink_type_id: int) -> bool:
        ...

    async def find_assignment_id(self, user_id: int, ink_type_id: int) -> Optional[int]:
        ...

    async def add_assignment(self, user_id: int, ink_type_id: int, max_quantity: int) -> int:
        """Insert a new assignment; raises Conflict if the pair already exists."""
        ...

    async def assignment_exists(self, assignment_id: int) -> bool:
        ...

    async def delete_assignment(self, assignment_id: int) -> bool:
        ...

    async def set_max_quantity(self, assignment_id: int, max_quantity: int) -> None:
        ...

    async def get_assignment_details(self, assignment_id: int) -> Optional[AssignmentDetails]:
        ...

    async def list_assignments(self, user_id: Optional[int] = None) -> Sequence[AssignmentDetails]:
        ...

    async def commit(self) -> None:
        ...
