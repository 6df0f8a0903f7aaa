from typing import Any, Dict

from inkdesk.accounts.domain.models import Account


def account_to_response(account: Account) -> Dict[str, Any]:
    # password_hash never leaves the service
    return {
        "id": account.id,
        "username": account.username,
        "email": account.email,
        "role": account.role,
        "created_at": account.created_at.isoformat() if account.created_at else None,
        "updated_at": account.updated_at.isoformat() if account.updated_at else None,
    }
