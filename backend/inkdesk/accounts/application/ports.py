from datetime import datetime
from typing import Optional, Protocol

from inkdesk.accounts.domain.models import Account


class AccountRepository(Protocol):
    async def get_by_id(self, account_id: int) -> Optional[Account]:
        ...

    async def get_by_email(self, email: str) -> Optional[Account]:
        ...

    async def get_by_username(self, username: str) -> Optional[Account]:
        ...

    async def add_account(
        self, username: str, email: str, password_hash: str, role: str, now: datetime
    ) -> Account:
        ...

    async def commit(self) -> None:
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...
