"""
Ink Request Routes - submit, list and review requests
"""
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from inkdesk.accounts.domain.models import Account
from inkdesk.common.errors import DomainError
from inkdesk.ink_requests.application.use_cases import (
    GetInkRequestUseCase,
    ListInkRequestsQuery,
    ListInkRequestsUseCase,
    ReviewInkRequestCommand,
    ReviewInkRequestUseCase,
    SubmitInkRequestCommand,
    SubmitInkRequestUseCase,
)
from inkdesk.ink_requests.infrastructure.sqlalchemy_repository import (
    SqlAlchemyInkRequestRepository,
)
from inkdesk.ink_requests.presentation.response_mapper import ink_request_to_response
from routes.auth_routes import UserRole, get_current_user, require_admin
from routes.http_errors import to_http_exception

# Create router
ink_request_router = APIRouter(prefix="/api", tags=["Ink Requests"])


# ==================== PYDANTIC MODELS ====================

class InkRequestCreate(BaseModel):
    ink_type_id: int
    requested_quantity: int = Field(gt=0)
    request_reason: Optional[str] = None


class InkRequestReview(BaseModel):
    status: Literal["approved", "rejected"]
    approved_quantity: Optional[int] = Field(default=None, ge=0)
    admin_notes: Optional[str] = None


# ==================== INK REQUEST ROUTES ====================

@ink_request_router.post("/requests")
async def submit_request(
    data: InkRequestCreate,
    current_user: Account = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Submit an ink request against one of the user's assignments"""
    use_case = SubmitInkRequestUseCase(
        repository=SqlAlchemyInkRequestRepository(session),
        clock=datetime.utcnow,
    )
    command = SubmitInkRequestCommand(
        ink_type_id=data.ink_type_id,
        requested_quantity=data.requested_quantity,
        request_reason=data.request_reason,
    )
    try:
        request = await use_case.execute(command, current_user.id)
    except DomainError as exc:
        raise to_http_exception(exc)
    return ink_request_to_response(request)


@ink_request_router.get("/requests")
async def list_all_requests(
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    requests = await ListInkRequestsUseCase(SqlAlchemyInkRequestRepository(session)).execute(
        ListInkRequestsQuery()
    )
    return [ink_request_to_response(req) for req in requests]


@ink_request_router.get("/requests/pending")
async def list_pending_requests(
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Requests waiting for review - admin only"""
    requests = await ListInkRequestsUseCase(SqlAlchemyInkRequestRepository(session)).execute(
        ListInkRequestsQuery(status="pending")
    )
    return [ink_request_to_response(req) for req in requests]


@ink_request_router.get("/requests/me")
async def list_my_requests(
    current_user: Account = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    requests = await ListInkRequestsUseCase(SqlAlchemyInkRequestRepository(session)).execute(
        ListInkRequestsQuery(user_id=current_user.id)
    )
    return [ink_request_to_response(req) for req in requests]


@ink_request_router.get("/requests/user/{user_id}")
async def list_user_requests(
    user_id: int,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    requests = await ListInkRequestsUseCase(SqlAlchemyInkRequestRepository(session)).execute(
        ListInkRequestsQuery(user_id=user_id)
    )
    return [ink_request_to_response(req) for req in requests]


@ink_request_router.get("/requests/{request_id}")
async def get_request(
    request_id: int,
    current_user: Account = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a single ink request"""
    request = await GetInkRequestUseCase(SqlAlchemyInkRequestRepository(session)).execute(
        request_id
    )
    if request is None:
        raise HTTPException(status_code=404, detail="Ink request not found")

    if current_user.role != UserRole.ADMIN and request.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not allowed to view this request")

    return ink_request_to_response(request)


@ink_request_router.post("/requests/{request_id}/review")
async def review_request(
    request_id: int,
    data: InkRequestReview,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Approve or reject a pending request - admin only"""
    use_case = ReviewInkRequestUseCase(
        repository=SqlAlchemyInkRequestRepository(session),
        clock=datetime.utcnow,
    )
    command = ReviewInkRequestCommand(
        request_id=request_id,
        status=data.status,
        admin_notes=data.admin_notes,
        approved_quantity=data.approved_quantity,
    )
    try:
        request = await use_case.execute(command, current_user.id)
    except DomainError as exc:
        raise to_http_exception(exc)
    return ink_request_to_response(request)
