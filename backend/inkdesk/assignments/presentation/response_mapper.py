from typing import Any, Dict

from inkdesk.assignments.domain.models import AssignmentDetails


def assignment_to_response(assignment: AssignmentDetails) -> Dict[str, Any]:
    return {
        "id": assignment.id,
        "user_id": assignment.user_id,
        "user_username": assignment.user_username,
        "ink_type_id": assignment.ink_type_id,
        "ink_type_name": assignment.ink_type_name,
        "ink_type_unit": assignment.ink_type_unit,
        "max_quantity_per_request": assignment.max_quantity_per_request,
        "created_at": assignment.created_at.isoformat() if assignment.created_at else None,
    }
