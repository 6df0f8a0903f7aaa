"""
Database package - settings, connection handle and ORM models
"""
from .config import Settings, get_settings
from .connection import Base, Database, get_database, get_session
from .models import (
    User,
    InkType,
    InkStock,
    UserInkAssignment,
    InkRequest,
    UserRole,
    RequestStatus,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Connection
    "Base",
    "Database",
    "get_database",
    "get_session",
    # Models
    "User",
    "InkType",
    "InkStock",
    "UserInkAssignment",
    "InkRequest",
    "UserRole",
    "RequestStatus",
]
