from datetime import datetime
from typing import Optional, Protocol, Sequence

from inkdesk.inventory.domain.models import InkType, StockLevel


class InventoryRepository(Protocol):
    async def add_ink_type(
        self, name: str, description: Optional[str], unit: str, now: datetime
    ) -> InkType:
        """Insert the ink type together with an empty stock record."""
        ...

    async def list_ink_types(self) -> Sequence[InkType]:
        ...

    async def get_ink_type(self, ink_type_id: int) -> Optional[InkType]:
        ...

    async def save_ink_type(self, ink_type: InkType) -> None:
        ...

    async def count_references(self, ink_type_id: int) -> int:
        """Assignments plus requests pointing at the ink type."""
        ...

    async def delete_ink_type(self, ink_type_id: int) -> bool:
        ...

    async def list_stock(self, low_only: bool = False) -> Sequence[StockLevel]:
        ...

    async def get_stock(self, ink_type_id: int) -> Optional[StockLevel]:
        ...

    async def set_stock(
        self, ink_type_id: int, current_stock: int, minimum_stock: int, now: datetime
    ) -> bool:
        ...

    async def commit(self) -> None:
        ...
