from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkdesk.accounts.application.ports import AccountRepository
from inkdesk.accounts.domain.models import Account
from inkdesk.common.errors import Conflict
from database import User


def _to_account(user: User) -> Account:
    return Account(
        id=user.id,
        username=user.username,
        email=user.email,
        password_hash=user.password_hash,
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class SqlAlchemyAccountRepository(AccountRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _one(self, query) -> Optional[Account]:
        result = await self._session.execute(query)
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return _to_account(user)

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        return await self._one(select(User).where(User.id == account_id))

    async def get_by_email(self, email: str) -> Optional[Account]:
        return await self._one(select(User).where(User.email == email))

    async def get_by_username(self, username: str) -> Optional[Account]:
        return await self._one(select(User).where(User.username == username))

    async def add_account(
        self, username: str, email: str, password_hash: str, role: str, now: datetime
    ) -> Account:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise Conflict("Username or email is already registered")
        return _to_account(user)

    async def commit(self) -> None:
        await self._session.commit()
