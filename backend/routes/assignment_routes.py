"""
Assignment Routes - which ink types each user may request
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from inkdesk.accounts.domain.models import Account
from inkdesk.assignments.application.use_cases import (
    GrantAssignmentCommand,
    GrantAssignmentUseCase,
    ListAssignmentsUseCase,
    RevokeAssignmentUseCase,
    UpdateAssignmentMaxUseCase,
)
from inkdesk.assignments.infrastructure.sqlalchemy_repository import (
    SqlAlchemyAssignmentRepository,
)
from inkdesk.assignments.presentation.response_mapper import assignment_to_response
from inkdesk.common.errors import DomainError
from routes.auth_routes import get_current_user, require_admin
from routes.http_errors import to_http_exception

# Create router
assignment_router = APIRouter(prefix="/api", tags=["Assignments"])


# ==================== PYDANTIC MODELS ====================

class AssignmentCreate(BaseModel):
    user_id: int
    ink_type_id: int
    max_quantity_per_request: int = Field(gt=0)


class AssignmentUpdate(BaseModel):
    max_quantity_per_request: int = Field(gt=0)


# ==================== ASSIGNMENT ROUTES ====================

@assignment_router.post("/assignments")
async def grant_assignment(
    data: AssignmentCreate,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Assign an ink type to a user - admin only"""
    use_case = GrantAssignmentUseCase(SqlAlchemyAssignmentRepository(session))
    command = GrantAssignmentCommand(
        user_id=data.user_id,
        ink_type_id=data.ink_type_id,
        max_quantity_per_request=data.max_quantity_per_request,
    )
    try:
        assignment = await use_case.execute(command)
    except DomainError as exc:
        raise to_http_exception(exc)
    return assignment_to_response(assignment)


@assignment_router.get("/assignments")
async def list_all_assignments(
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    assignments = await ListAssignmentsUseCase(SqlAlchemyAssignmentRepository(session)).execute()
    return [assignment_to_response(assignment) for assignment in assignments]


@assignment_router.get("/assignments/me")
async def list_my_assignments(
    current_user: Account = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Ink types the current user may request"""
    assignments = await ListAssignmentsUseCase(SqlAlchemyAssignmentRepository(session)).execute(
        current_user.id
    )
    return [assignment_to_response(assignment) for assignment in assignments]


@assignment_router.get("/assignments/user/{user_id}")
async def list_user_assignments(
    user_id: int,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    assignments = await ListAssignmentsUseCase(SqlAlchemyAssignmentRepository(session)).execute(
        user_id
    )
    return [assignment_to_response(assignment) for assignment in assignments]


@assignment_router.put("/assignments/{assignment_id}")
async def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Change the per-request cap - admin only"""
    use_case = UpdateAssignmentMaxUseCase(SqlAlchemyAssignmentRepository(session))
    try:
        assignment = await use_case.execute(assignment_id, data.max_quantity_per_request)
    except DomainError as exc:
        raise to_http_exception(exc)
    return assignment_to_response(assignment)


@assignment_router.delete("/assignments/{assignment_id}")
async def revoke_assignment(
    assignment_id: int,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Remove an assignment - admin only"""
    use_case = RevokeAssignmentUseCase(SqlAlchemyAssignmentRepository(session))
    try:
        removed = await use_case.execute(assignment_id)
    except DomainError as exc:
        raise to_http_exception(exc)
    return {"success": removed}
