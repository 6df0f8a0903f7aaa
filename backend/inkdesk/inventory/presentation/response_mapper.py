from typing import Any, Dict

from inkdesk.inventory.domain.models import InkType, StockLevel


def ink_type_to_response(ink_type: InkType) -> Dict[str, Any]:
    return {
        "id": ink_type.id,
        "name": ink_type.name,
        "description": ink_type.description,
        "unit": ink_type.unit,
        "created_at": ink_type.created_at.isoformat() if ink_type.created_at else None,
        "updated_at": ink_type.updated_at.isoformat() if ink_type.updated_at else None,
    }


def stock_level_to_response(stock: StockLevel) -> Dict[str, Any]:
    return {
        "id": stock.id,
        "ink_type_id": stock.ink_type_id,
        "ink_type_name": stock.ink_type_name,
        "ink_type_unit": stock.ink_type_unit,
        "current_stock": stock.current_stock,
        "minimum_stock": stock.minimum_stock,
        "is_low": stock.is_low,
        "updated_at": stock.updated_at.isoformat() if stock.updated_at else None,
    }
