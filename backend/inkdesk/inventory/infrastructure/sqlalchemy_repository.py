from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkdesk.inventory.application.ports import InventoryRepository
from inkdesk.inventory.domain.models import InkType, StockLevel
from database import (
    InkRequest,
    InkStock,
    InkType as InkTypeModel,
    UserInkAssignment,
)


def _to_ink_type(model: InkTypeModel) -> InkType:
    return InkType(
        id=model.id,
        name=model.name,
        description=model.description,
        unit=model.unit,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _stock_query():
    return select(
        InkStock.id,
        InkStock.ink_type_id,
        InkTypeModel.name,
        InkTypeModel.unit,
        InkStock.current_stock,
        InkStock.minimum_stock,
        InkStock.updated_at,
    ).join(InkTypeModel, InkStock.ink_type_id == InkTypeModel.id)


def _to_stock(row) -> StockLevel:
    return StockLevel(
        id=row[0],
        ink_type_id=row[1],
        ink_type_name=row[2],
        ink_type_unit=row[3],
        current_stock=row[4],
        minimum_stock=row[5],
        updated_at=row[6],
    )


class SqlAlchemyInventoryRepository(InventoryRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_ink_type(
        self, name: str, description: Optional[str], unit: str, now: datetime
    ) -> InkType:
        ink_type = InkTypeModel(
            name=name,
            description=description,
            unit=unit,
            created_at=now,
            updated_at=now,
        )
        self._session.add(ink_type)
        await self._session.flush()

        self._session.add(
            InkStock(
                ink_type_id=ink_type.id,
                current_stock=0,
                minimum_stock=0,
                updated_at=now,
            )
        )
        await self._session.flush()
        return _to_ink_type(ink_type)

    async def list_ink_types(self) -> Sequence[InkType]:
        result = await self._session.execute(select(InkTypeModel).order_by(InkTypeModel.name))
        return [_to_ink_type(model) for model in result.scalars().all()]

    async def get_ink_type(self, ink_type_id: int) -> Optional[InkType]:
        result = await self._session.execute(
            select(InkTypeModel).where(InkTypeModel.id == ink_type_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return _to_ink_type(model)

    async def save_ink_type(self, ink_type: InkType) -> None:
        await self._session.execute(
            update(InkTypeModel)
            .where(InkTypeModel.id == ink_type.id)
            .values(
                name=ink_type.name,
                description=ink_type.description,
                unit=ink_type.unit,
                updated_at=ink_type.updated_at,
            )
            .execution_options(synchronize_session=False)
        )

    async def count_references(self, ink_type_id: int) -> int:
        assignments = await self._session.execute(
            select(func.count()).select_from(UserInkAssignment)
            .where(UserInkAssignment.ink_type_id == ink_type_id)
        )
        requests = await self._session.execute(
            select(func.count()).select_from(InkRequest)
            .where(InkRequest.ink_type_id == ink_type_id)
        )
        return (assignments.scalar() or 0) + (requests.scalar() or 0)

    async def delete_ink_type(self, ink_type_id: int) -> bool:
        await self._session.execute(delete(InkStock).where(InkStock.ink_type_id == ink_type_id))
        result = await self._session.execute(
            delete(InkTypeModel).where(InkTypeModel.id == ink_type_id)
        )
        return result.rowcount > 0

    async def list_stock(self, low_only: bool = False) -> Sequence[StockLevel]:
        query = _stock_query()
        if low_only:
            query = query.where(InkStock.current_stock <= InkStock.minimum_stock)
        query = query.order_by(InkTypeModel.name)

        result = await self._session.execute(query)
        return [_to_stock(row) for row in result.all()]

    async def get_stock(self, ink_type_id: int) -> Optional[StockLevel]:
        result = await self._session.execute(
            _stock_query().where(InkStock.ink_type_id == ink_type_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return _to_stock(row)

    async def set_stock(
        self, ink_type_id: int, current_stock: int, minimum_stock: int, now: datetime
    ) -> bool:
        result = await self._session.execute(
            update(InkStock)
            .where(InkStock.ink_type_id == ink_type_id)
            .values(current_stock=current_stock, minimum_stock=minimum_stock, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def commit(self) -> None:
        await self._session.commit()
