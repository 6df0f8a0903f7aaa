from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional, Sequence
import logging

from inkdesk.common.errors import Conflict, InvalidRequest, NotFound
from inkdesk.inventory.application.ports import InventoryRepository
from inkdesk.inventory.domain.models import InkType, StockLevel

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class CreateInkTypeCommand:
    name: str
    unit: str
    description: Optional[str] = None


@dataclass(frozen=True)
class UpdateInkTypeCommand:
    id: int
    name: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None
    # description may be cleared, so "not given" needs its own flag
    description_given: bool = False


@dataclass(frozen=True)
class UpdateStockCommand:
    ink_type_id: int
    current_stock: int
    minimum_stock: int


def _require_text(value: str, field: str) -> str:
    if not value or not value.strip():
        raise InvalidRequest(f"Ink type {field} is required")
    return value


class CreateInkTypeUseCase:
    def __init__(self, repository: InventoryRepository, clock: Clock) -> None:
        self._repository = repository
        self._clock = clock

    async def execute(self, command: CreateInkTypeCommand) -> InkType:
        _require_text(command.name, "name")
        _require_text(command.unit, "unit")

        ink_type = await self._repository.add_ink_type(
            command.name, command.description, command.unit, self._clock()
        )
        await self._repository.commit()
        logger.info(f"Ink type {ink_type.id} ({ink_type.name}) created")
        return ink_type


class ListInkTypesUseCase:
    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    async def execute(self) -> Sequence[InkType]:
        return await self._repository.list_ink_types()


class GetInkTypeUseCase:
    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    async def execute(self, ink_type_id: int) -> Optional[InkType]:
        return await self._repository.get_ink_type(ink_type_id)


class UpdateInkTypeUseCase:
    def __init__(self, repository: InventoryRepository, clock: Clock) -> None:
        self._repository = repository
        self._clock = clock

    async def execute(self, command: UpdateInkTypeCommand) -> InkType:
        ink_type = await self._repository.get_ink_type(command.id)
        if ink_type is None:
            raise NotFound(f"Ink type with id {command.id} not found")

        changes = {}
        if command.name is not None:
            changes["name"] = _require_text(command.name, "name")
        if command.unit is not None:
            changes["unit"] = _require_text(command.unit, "unit")
        if command.description_given:
            changes["description"] = command.description

        updated = replace(ink_type, updated_at=self._clock(), **changes)
        await self._repository.save_ink_type(updated)
        await self._repository.commit()
        logger.info(f"Ink type {updated.id} updated")
        return updated


class DeleteInkTypeUseCase:
    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    async def execute(self, ink_type_id: int) -> bool:
        if await self._repository.get_ink_type(ink_type_id) is None:
            raise NotFound(f"Ink type with id {ink_type_id} not found")

        if await self._repository.count_references(ink_type_id) > 0:
            raise Conflict("Ink type is still assigned or requested and cannot be deleted")

        deleted = await self._repository.delete_ink_type(ink_type_id)
        await self._repository.commit()
        logger.info(f"Ink type {ink_type_id} deleted with its stock record")
        return deleted


class ListStockLevelsUseCase:
    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    async def execute(self) -> Sequence[StockLevel]:
        return await self._repository.list_stock()


class GetStockByTypeUseCase:
    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    async def execute(self, ink_type_id: int) -> Optional[StockLevel]:
        return await self._repository.get_stock(ink_type_id)


class UpdateStockUseCase:
    def __init__(self, repository: InventoryRepository, clock: Clock) -> None:
        self._repository = repository
        self._clock = clock

    async def execute(self, command: UpdateStockCommand) -> StockLevel:
        if command.current_stock < 0 or command.minimum_stock < 0:
            raise InvalidRequest("Stock quantities cannot be negative")

        updated = await self._repository.set_stock(
            command.ink_type_id, command.current_stock, command.minimum_stock, self._clock()
        )
        if not updated:
            raise NotFound("No stock information found for this ink type")
        await self._repository.commit()
        logger.info(
            f"Stock for ink type {command.ink_type_id} set to {command.current_stock} "
            f"(minimum {command.minimum_stock})"
        )

        stock = await self._repository.get_stock(command.ink_type_id)
        if stock is None:
            raise NotFound("No stock information found for this ink type")
        return stock


class LowStockAlertsUseCase:
    """Stock levels at or below their minimum threshold."""

    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    async def execute(self) -> Sequence[StockLevel]:
        return await self._repository.list_stock(low_only=True)
