from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AssignmentDetails:
    id: int
    user_id: int
    user_username: str
    ink_type_id: int
    ink_type_name: str
    ink_type_unit: str
    max_quantity_per_request: int
    created_at: datetime
