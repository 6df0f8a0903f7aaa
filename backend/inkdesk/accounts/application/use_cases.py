from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
import logging

from inkdesk.accounts.application.ports import AccountRepository, PasswordHasher
from inkdesk.accounts.domain.models import Account
from inkdesk.common.errors import Conflict, InvalidRequest

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

ROLES = ("user", "admin")
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class RegisterAccountCommand:
    username: str
    email: str
    password: str
    role: str = "user"


@dataclass(frozen=True)
class LoginCommand:
    email: str
    password: str


class RegisterAccountUseCase:
    def __init__(
        self,
        repository: AccountRepository,
        hasher: PasswordHasher,
        clock: Clock,
    ) -> None:
        self._repository = repository
        self._hasher = hasher
        self._clock = clock

    async def execute(self, command: RegisterAccountCommand) -> Account:
        if len(command.username) < MIN_USERNAME_LENGTH:
            raise InvalidRequest(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters"
            )
        if len(command.password) < MIN_PASSWORD_LENGTH:
            raise InvalidRequest(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if command.role not in ROLES:
            raise InvalidRequest(f"Unknown role: {command.role}")

        if await self._repository.get_by_email(command.email) is not None:
            raise Conflict("User with this email already exists")

        if await self._repository.get_by_username(command.username) is not None:
            raise Conflict("Username is already taken")

        account = await self._repository.add_account(
            username=command.username,
            email=command.email,
            password_hash=self._hasher.hash(command.password),
            role=command.role,
            now=self._clock(),
        )
        await self._repository.commit()
        logger.info(f"Registered {account.role} account {account.id} ({account.username})")
        return account


class LoginUseCase:
    """Returns the account for valid credentials, None otherwise."""

    def __init__(self, repository: AccountRepository, hasher: PasswordHasher) -> None:
        self._repository = repository
        self._hasher = hasher

    async def execute(self, command: LoginCommand) -> Optional[Account]:
        account = await self._repository.get_by_email(command.email)
        if account is None:
            return None

        if not self._hasher.verify(command.password, account.password_hash):
            logger.warning(f"Failed login for account {account.id}")
            return None

        return account


class GetAccountUseCase:
    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    async def execute(self, account_id: int) -> Optional[Account]:
        return await self._repository.get_by_id(account_id)
