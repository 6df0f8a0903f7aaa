from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from inkdesk.assignments.application.ports import AssignmentRepository
from inkdesk.assignments.domain.models import AssignmentDetails
from inkdesk.common.errors import Conflict, InvalidRequest, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrantAssignmentCommand:
    user_id: int
    ink_type_id: int
    max_quantity_per_request: int


def _require_positive(max_quantity: int) -> None:
    if max_quantity <= 0:
        raise InvalidRequest("Maximum quantity per request must be greater than zero")


class GrantAssignmentUseCase:
    def __init__(self, repository: AssignmentRepository) -> None:
        self._repository = repository

    async def execute(self, command: GrantAssignmentCommand) -> AssignmentDetails:
        _require_positive(command.max_quantity_per_request)

        if not await self._repository.user_exists(command.user_id):
            raise NotFound(f"User with id {command.user_id} not found")

        if not await self._repository.ink_type_exists(command.ink_type_id):
            raise NotFound(f"Ink type with id {command.ink_type_id} not found")

        existing = await self._repository.find_assignment_id(command.user_id, command.ink_type_id)
        if existing is not None:
            raise Conflict(
                f"User {command.user_id} already has assignment for ink type {command.ink_type_id}"
            )

        assignment_id = await self._repository.add_assignment(
            command.user_id, command.ink_type_id, command.max_quantity_per_request
        )
        await self._repository.commit()
        logger.info(
            f"Assigned ink type {command.ink_type_id} to user {command.user_id} "
            f"(max {command.max_quantity_per_request} per request)"
        )

        details = await self._repository.get_assignment_details(assignment_id)
        if details is None:
            raise NotFound(f"Assignment with id {assignment_id} not found")
        return details


class ListAssignmentsUseCase:
    def __init__(self, repository: AssignmentRepository) -> None:
        self._repository = repository

    async def execute(self, user_id: Optional[int] = None) -> Sequence[AssignmentDetails]:
        return await self._repository.list_assignments(user_id)


class RevokeAssignmentUseCase:
    def __init__(self, repository: AssignmentRepository) -> None:
        self._repository = repository

    async def execute(self, assignment_id: int) -> bool:
        if not await self._repository.assignment_exists(assignment_id):
            raise NotFound(f"Assignment with id {assignment_id} not found")

        deleted = await self._repository.delete_assignment(assignment_id)
        await self._repository.commit()
        logger.info(f"Assignment {assignment_id} removed")
        return deleted


class UpdateAssignmentMaxUseCase:
    def __init__(self, repository: AssignmentRepository) -> None:
        self._repository = repository

    async def execute(self, assignment_id: int, max_quantity: int) -> AssignmentDetails:
        _require_positive(max_quantity)

        if not await self._repository.assignment_exists(assignment_id):
            raise NotFound(f"Assignment with id {assignment_id} not found")

        await self._repository.set_max_quantity(assignment_id, max_quantity)
        await self._repository.commit()
        logger.info(f"Assignment {assignment_id} max quantity set to {max_quantity}")

        details = await self._repository.get_assignment_details(assignment_id)
        if details is None:
            raise NotFound(f"Assignment with id {assignment_id} not found")
        return details
