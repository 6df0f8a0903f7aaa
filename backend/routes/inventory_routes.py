"""
Inventory Routes - ink types and their stock levels
"""
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from inkdesk.accounts.domain.models import Account
from inkdesk.common.errors import DomainError
from inkdesk.inventory.application.use_cases import (
    CreateInkTypeCommand,
    CreateInkTypeUseCase,
    DeleteInkTypeUseCase,
    GetInkTypeUseCase,
    GetStockByTypeUseCase,
    ListInkTypesUseCase,
    ListStockLevelsUseCase,
    LowStockAlertsUseCase,
    UpdateInkTypeCommand,
    UpdateInkTypeUseCase,
    UpdateStockCommand,
    UpdateStockUseCase,
)
from inkdesk.inventory.infrastructure.sqlalchemy_repository import SqlAlchemyInventoryRepository
from inkdesk.inventory.presentation.response_mapper import (
    ink_type_to_response,
    stock_level_to_response,
)
from routes.auth_routes import get_current_user, require_admin
from routes.http_errors import to_http_exception

# Create router
inventory_router = APIRouter(prefix="/api", tags=["Ink Types & Stock"])


# ==================== PYDANTIC MODELS ====================

class InkTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    unit: str = Field(min_length=1)


class InkTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    unit: Optional[str] = Field(default=None, min_length=1)


class StockUpdate(BaseModel):
    current_stock: int = Field(ge=0)
    minimum_stock: int = Field(ge=0)


# ==================== INK TYPE ROUTES ====================

@inventory_router.post("/ink-types")
async def create_ink_type(
    data: InkTypeCreate,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Create an ink type and its empty stock record - admin only"""
    use_case = CreateInkTypeUseCase(SqlAlchemyInventoryRepository(session), clock=datetime.utcnow)
    try:
        ink_type = await use_case.execute(
            CreateInkTypeCommand(name=data.name, description=data.description, unit=data.unit)
        )
    except DomainError as exc:
        raise to_http_exception(exc)
    return ink_type_to_response(ink_type)


@inventory_router.get("/ink-types")
async def list_ink_types(
    current_user: Account = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    ink_types = await ListInkTypesUseCase(SqlAlchemyInventoryRepository(session)).execute()
    return [ink_type_to_response(ink_type) for ink_type in ink_types]


@inventory_router.get("/ink-types/{ink_type_id}")
async def get_ink_type(
    ink_type_id: int,
    current_user: Account = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    ink_type = await GetInkTypeUseCase(SqlAlchemyInventoryRepository(session)).execute(ink_type_id)
    if ink_type is None:
        raise HTTPException(status_code=404, detail="Ink type not found")
    return ink_type_to_response(ink_type)


@inventory_router.put("/ink-types/{ink_type_id}")
async def update_ink_type(
    ink_type_id: int,
    data: InkTypeUpdate,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Update ink type fields - admin only"""
    use_case = UpdateInkTypeUseCase(SqlAlchemyInventoryRepository(session), clock=datetime.utcnow)
    command = UpdateInkTypeCommand(
        id=ink_type_id,
        name=data.name,
        unit=data.unit,
        description=data.description,
        description_given="description" in data.model_fields_set,
    )
    try:
        ink_type = await use_case.execute(command)
    except DomainError as exc:
        raise to_http_exception(exc)
    return ink_type_to_response(ink_type)


@inventory_router.delete("/ink-types/{ink_type_id}")
async def delete_ink_type(
    ink_type_id: int,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Delete an ink type and its stock record - admin only"""
    try:
        deleted = await DeleteInkTypeUseCase(SqlAlchemyInventoryRepository(session)).execute(
            ink_type_id
        )
    except DomainError as exc:
        raise to_http_exception(exc)
    return {"success": deleted}


# ==================== STOCK ROUTES ====================

@inventory_router.get("/stock")
async def list_stock_levels(
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    levels = await ListStockLevelsUseCase(SqlAlchemyInventoryRepository(session)).execute()
    return [stock_level_to_response(level) for level in levels]


@inventory_router.get("/stock/low")
async def low_stock_alerts(
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Ink types at or below their minimum stock"""
    levels = await LowStockAlertsUseCase(SqlAlchemyInventoryRepository(session)).execute()
    return [stock_level_to_response(level) for level in levels]


@inventory_router.get("/stock/{ink_type_id}")
async def get_stock_by_type(
    ink_type_id: int,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    stock = await GetStockByTypeUseCase(SqlAlchemyInventoryRepository(session)).execute(ink_type_id)
    if stock is None:
        raise HTTPException(status_code=404, detail="No stock information found for this ink type")
    return stock_level_to_response(stock)


@inventory_router.put("/stock/{ink_type_id}")
async def update_stock(
    ink_type_id: int,
    data: StockUpdate,
    current_user: Account = Depends(require_admin),
    session: AsyncSession = Depends(get_session)
):
    """Manually set current and minimum stock - admin only"""
    use_case = UpdateStockUseCase(SqlAlchemyInventoryRepository(session), clock=datetime.utcnow)
    command = UpdateStockCommand(
        ink_type_id=ink_type_id,
        current_stock=data.current_stock,
        minimum_stock=data.minimum_stock,
    )
    try:
        stock = await use_case.execute(command)
    except DomainError as exc:
        raise to_http_exception(exc)
    return stock_level_to_response(stock)
