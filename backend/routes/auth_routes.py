"""
Auth Routes - registration, login and the current-user dependencies
"""
from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr, Field
from typing import Literal
from datetime import datetime, timezone, timedelta
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func

from database import Settings, User, get_session, get_settings
from inkdesk.accounts.application.use_cases import (
    GetAccountUseCase,
    LoginCommand,
    LoginUseCase,
    RegisterAccountCommand,
    RegisterAccountUseCase,
)
from inkdesk.accounts.domain.models import Account
from inkdesk.accounts.infrastructure.password_hasher import BcryptPasswordHasher
from inkdesk.accounts.infrastructure.sqlalchemy_repository import SqlAlchemyAccountRepository
from inkdesk.accounts.presentation.response_mapper import account_to_response
from inkdesk.common.errors import DomainError
from routes.http_errors import to_http_exception

ALGORITHM = "HS256"

password_hasher = BcryptPasswordHasher()

# Security
security = HTTPBearer()

# Create router
auth_router = APIRouter(prefix="/api", tags=["Auth"])


# ==================== PYDANTIC MODELS ====================

class UserRole:
    USER = "user"
    ADMIN = "admin"


class UserRegister(BaseModel):
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["user", "admin"] = "user"


class UserLogin(BaseModel):
    email: EmailStr
    password: str


# ==================== HELPER FUNCTIONS ====================

def create_access_token(data: dict, settings: Settings) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> Account:
    """Resolve the bearer token to an account"""
    try:
        payload = jwt.decode(credentials.credentials, settings.secret_key, algorithms=[ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            raise HTTPException(status_code=401, detail="Invalid access token")
        account_id = int(subject)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid access token")

    account = await GetAccountUseCase(SqlAlchemyAccountRepository(session)).execute(account_id)
    if account is None:
        raise HTTPException(status_code=401, detail="User not found")
    return account


async def require_admin(current_user: Account = Depends(get_current_user)) -> Account:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


# ==================== AUTH ROUTES ====================

@auth_router.get("/health")
async def api_health_check(session: AsyncSession = Depends(get_session)):
    """Health check including a database round trip"""
    try:
        result = await session.execute(select(func.count()).select_from(User))
        count = result.scalar()
        return {"status": "healthy", "database": "postgresql", "users_count": count}
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")


@auth_router.post("/auth/register")
async def register(
    user_data: UserRegister,
    session: AsyncSession = Depends(get_session),
):
    """Register a new account"""
    use_case = RegisterAccountUseCase(
        repository=SqlAlchemyAccountRepository(session),
        hasher=password_hasher,
        clock=datetime.utcnow,
    )
    command = RegisterAccountCommand(
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
    )
    try:
        account = await use_case.execute(command)
    except DomainError as exc:
        raise to_http_exception(exc)

    return account_to_response(account)


@auth_router.post("/auth/login")
async def login(
    credentials: UserLogin,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Log in with email and password"""
    use_case = LoginUseCase(SqlAlchemyAccountRepository(session), password_hasher)
    account = await use_case.execute(
        LoginCommand(email=credentials.email, password=credentials.password)
    )
    if account is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token({"sub": str(account.id), "role": account.role}, settings)
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": account_to_response(account),
    }


@auth_router.get("/auth/me")
async def get_me(current_user: Account = Depends(get_current_user)):
    """Current user's profile"""
    return account_to_response(current_user)
