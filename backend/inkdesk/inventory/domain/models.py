from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class InkType:
    id: int
    name: str
    description: Optional[str]
    unit: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StockLevel:
    """Stock for one ink type, joined with the type's name and unit."""

    id: int
    ink_type_id: int
    ink_type_name: str
    ink_type_unit: str
    current_stock: int
    minimum_stock: int
    updated_at: datetime

    @property
    def is_low(self) -> bool:
        return self.current_stock <= self.minimum_stock
