from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from inkdesk.ink_requests.application.ports import InkRequestRepository
from inkdesk.ink_requests.domain.models import (
    PENDING,
    AssignmentQuota,
    InkRequestDetails,
    InkRequestRecord,
    NewInkRequest,
    RequestFilters,
    ReviewOutcome,
    StockSnapshot,
)
from database import (
    InkRequest as InkRequestModel,
    InkStock,
    InkType,
    User,
    UserInkAssignment,
)

ReviewingAdmin = aliased(User, name="reviewing_admin")


def _details_query():
    return (
        select(
            InkRequestModel,
            User.username,
            User.email,
            InkType.name,
            InkType.unit,
            ReviewingAdmin.username,
        )
        .join(User, InkRequestModel.user_id == User.id)
        .join(InkType, InkRequestModel.ink_type_id == InkType.id)
        .outerjoin(ReviewingAdmin, InkRequestModel.reviewed_by_admin_id == ReviewingAdmin.id)
    )


def _to_details(row) -> InkRequestDetails:
    req, username, email, ink_type_name, ink_type_unit, admin_username = row
    return InkRequestDetails(
        id=req.id,
        user_id=req.user_id,
        user_username=username,
        user_email=email,
        ink_type_id=req.ink_type_id,
        ink_type_name=ink_type_name,
        ink_type_unit=ink_type_unit,
        requested_quantity=req.requested_quantity,
        approved_quantity=req.approved_quantity,
        status=req.status,
        request_reason=req.request_reason,
        admin_notes=req.admin_notes,
        reviewed_by_admin_id=req.reviewed_by_admin_id,
        reviewed_by_admin_username=admin_username,
        requested_at=req.requested_at,
        reviewed_at=req.reviewed_at,
    )


class SqlAlchemyInkRequestRepository(InkRequestRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_assignment(self, user_id: int, ink_type_id: int) -> Optional[AssignmentQuota]:
        result = await self._session.execute(
            select(UserInkAssignment).where(
                UserInkAssignment.user_id == user_id,
                UserInkAssignment.ink_type_id == ink_type_id,
            )
        )
        assignment = result.scalar_one_or_none()
        if assignment is None:
            return None
        return AssignmentQuota(
            user_id=assignment.user_id,
            ink_type_id=assignment.ink_type_id,
            max_quantity_per_request=assignment.max_quantity_per_request,
        )

    async def add_request(self, request: NewInkRequest) -> int:
        new_request = InkRequestModel(
            user_id=request.user_id,
            ink_type_id=request.ink_type_id,
            requested_quantity=request.requested_quantity,
            approved_quantity=None,
            status=PENDING,
            request_reason=request.request_reason,
            reviewed_by_admin_id=None,
            requested_at=request.requested_at,
        )
        self._session.add(new_request)
        await self._session.flush()
        return new_request.id

    async def get_request(self, request_id: int) -> Optional[InkRequestRecord]:
        result = await self._session.execute(
            select(InkRequestModel).where(InkRequestModel.id == request_id)
        )
        req = result.scalar_one_or_none()
        if req is None:
            return None
        return InkRequestRecord(
            id=req.id,
            user_id=req.user_id,
            ink_type_id=req.ink_type_id,
            requested_quantity=req.requested_quantity,
            approved_quantity=req.approved_quantity,
            status=req.status,
            request_reason=req.request_reason,
            admin_notes=req.admin_notes,
            reviewed_by_admin_id=req.reviewed_by_admin_id,
            requested_at=req.requested_at,
            reviewed_at=req.reviewed_at,
        )

    async def get_stock(self, ink_type_id: int) -> Optional[StockSnapshot]:
        result = await self._session.execute(
            select(InkStock.current_stock).where(InkStock.ink_type_id == ink_type_id)
        )
        current_stock = result.scalar_one_or_none()
        if current_stock is None:
            return None
        return StockSnapshot(ink_type_id=ink_type_id, current_stock=current_stock)

    async def decrement_stock(self, ink_type_id: int, amount: int, updated_at: datetime) -> bool:
        result = await self._session.execute(
            update(InkStock)
            .where(
                InkStock.ink_type_id == ink_type_id,
                InkStock.current_stock >= amount,
            )
            .values(current_stock=InkStock.current_stock - amount, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_reviewed(self, outcome: ReviewOutcome) -> bool:
        result = await self._session.execute(
            update(InkRequestModel)
            .where(
                InkRequestModel.id == outcome.request_id,
                InkRequestModel.status == PENDING,
            )
            .values(
                status=outcome.status,
                approved_quantity=outcome.approved_quantity,
                admin_notes=outcome.admin_notes,
                reviewed_by_admin_id=outcome.reviewed_by_admin_id,
                reviewed_at=outcome.reviewed_at,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def get_request_details(self, request_id: int) -> Optional[InkRequestDetails]:
        result = await self._session.execute(
            _details_query().where(InkRequestModel.id == request_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return _to_details(row)

    async def list_requests(self, filters: RequestFilters) -> Sequence[InkRequestDetails]:
        query = _details_query()

        if filters.user_id is not None:
            query = query.where(InkRequestModel.user_id == filters.user_id)
        if filters.status:
            query = query.where(InkRequestModel.status == filters.status)

        query = query.order_by(desc(InkRequestModel.requested_at), desc(InkRequestModel.id))

        result = await self._session.execute(query)
        return [_to_details(row) for row in result.all()]

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
