from typing import Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkdesk.assignments.application.ports import AssignmentRepository
from inkdesk.assignments.domain.models import AssignmentDetails
from inkdesk.common.errors import Conflict
from database import InkType, User, UserInkAssignment


def _details_query():
    return (
        select(
            UserInkAssignment.id,
            UserInkAssignment.user_id,
            User.username,
            UserInkAssignment.ink_type_id,
            InkType.name,
            InkType.unit,
            UserInkAssignment.max_quantity_per_request,
            UserInkAssignment.created_at,
        )
        .join(User, UserInkAssignment.user_id == User.id)
        .join(InkType, UserInkAssignment.ink_type_id == InkType.id)
    )


def _to_details(row) -> AssignmentDetails:
    return AssignmentDetails(
        id=row[0],
        user_id=row[1],
        user_username=row[2],
        ink_type_id=row[3],
        ink_type_name=row[4],
        ink_type_unit=row[5],
        max_quantity_per_request=row[6],
        created_at=row[7],
    )


class SqlAlchemyAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def user_exists(self, user_id: int) -> bool:
        result = await self._session.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def ink_type_exists(self, ink_type_id: int) -> bool:
        result = await self._session.execute(select(InkType.id).where(InkType.id == ink_type_id))
        return result.scalar_one_or_none() is not None

    async def find_assignment_id(self, user_id: int, ink_type_id: int) -> Optional[int]:
        result = await self._session.execute(
            select(UserInkAssignment.id).where(
                UserInkAssignment.user_id == user_id,
                UserInkAssignment.ink_type_id == ink_type_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_assignment(self, user_id: int, ink_type_id: int, max_quantity: int) -> int:
        assignment = UserInkAssignment(
            user_id=user_id,
            ink_type_id=ink_type_id,
            max_quantity_per_request=max_quantity,
        )
        self._session.add(assignment)
        try:
            await self._session.flush()
        except IntegrityError:
            # a concurrent grant for the same pair won the unique constraint
            await self._session.rollback()
            raise Conflict(f"User {user_id} already has assignment for ink type {ink_type_id}")
        return assignment.id

    async def assignment_exists(self, assignment_id: int) -> bool:
        result = await self._session.execute(
            select(UserInkAssignment.id).where(UserInkAssignment.id == assignment_id)
        )
        return result.scalar_one_or_none() is not None

    async def delete_assignment(self, assignment_id: int) -> bool:
        result = await self._session.execute(
            delete(UserInkAssignment).where(UserInkAssignment.id == assignment_id)
        )
        return result.rowcount > 0

    async def set_max_quantity(self, assignment_id: int, max_quantity: int) -> None:
        await self._session.execute(
            update(UserInkAssignment)
            .where(UserInkAssignment.id == assignment_id)
            .values(max_quantity_per_request=max_quantity)
            .execution_options(synchronize_session=False)
        )

    async def get_assignment_details(self, assignment_id: int) -> Optional[AssignmentDetails]:
        result = await self._session.execute(
            _details_query().where(UserInkAssignment.id == assignment_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return _to_details(row)

    async def list_assignments(self, user_id: Optional[int] = None) -> Sequence[AssignmentDetails]:
        query = _details_query()
        if user_id is not None:
            query = query.where(UserInkAssignment.user_id == user_id)
        query = query.order_by(UserInkAssignment.id)

        result = await self._session.execute(query)
        return [_to_details(row) for row in result.all()]

    async def commit(self) -> None:
        await self._session.commit()
