from typing import Any, Dict

from inkdesk.ink_requests.domain.models import InkRequestDetails


def ink_request_to_response(request: InkRequestDetails) -> Dict[str, Any]:
    return {
        "id": request.id,
        "user_id": request.user_id,
        "user_username": request.user_username,
        "user_email": request.user_email,
        "ink_type_id": request.ink_type_id,
        "ink_type_name": request.ink_type_name,
        "ink_type_unit": request.ink_type_unit,
        "requested_quantity": request.requested_quantity,
        "approved_quantity": request.approved_quantity,
        "status": request.status,
        "request_reason": request.request_reason,
        "admin_notes": request.admin_notes,
        "reviewed_by_admin_id": request.reviewed_by_admin_id,
        "reviewed_by_admin_username": request.reviewed_by_admin_username,
        "requested_at": request.requested_at.isoformat() if request.requested_at else None,
        "reviewed_at": request.reviewed_at.isoformat() if request.reviewed_at else None,
    }
