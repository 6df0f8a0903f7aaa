"""
Database Models - SQLAlchemy ORM
All tables for the Ink Request Tracker
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import (
    CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from .connection import Base


# ==================== ENUMS ====================

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ==================== USER MODEL ====================

class User(Base):
    """User table - regular users and administrators"""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )


# ==================== INK TYPE & STOCK MODELS ====================

class InkType(Base):
    """Ink types - the consumables that can be requested"""
    __tablename__ = "ink_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)  # e.g. bottle, liter, ml
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    stock: Mapped[Optional["InkStock"]] = relationship(
        back_populates="ink_type",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )


class InkStock(Base):
    """Stock level - exactly one row per ink type"""
    __tablename__ = "ink_stock"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ink_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ink_types.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minimum_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    ink_type: Mapped["InkType"] = relationship(back_populates="stock")

    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_ink_stock_current_non_negative"),
        CheckConstraint("minimum_stock >= 0", name="ck_ink_stock_minimum_non_negative"),
    )


# ==================== ASSIGNMENT MODEL ====================

class UserInkAssignment(Base):
    """Which ink types a user may request, and how much per request"""
    __tablename__ = "user_ink_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ink_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("ink_types.id"), nullable=False, index=True)
    max_quantity_per_request: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "ink_type_id", name="uq_user_ink_assignments_user_ink_type"),
        CheckConstraint("max_quantity_per_request > 0", name="ck_user_ink_assignments_max_positive"),
    )


# ==================== INK REQUEST MODEL ====================

class InkRequest(Base):
    """Ink request - created pending, reviewed exactly once"""
    __tablename__ = "ink_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ink_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("ink_types.id"), nullable=False, index=True)
    requested_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    approved_quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # only set when approved
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    request_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by_admin_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    requested_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("requested_quantity > 0", name="ck_ink_requests_requested_positive"),
        CheckConstraint(
            "approved_quantity IS NULL OR approved_quantity >= 0",
            name="ck_ink_requests_approved_non_negative",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name="ck_ink_requests_status"
        ),
        Index('idx_ink_requests_status_requested_at', 'status', 'requested_at'),
        Index('idx_ink_requests_user_requested_at', 'user_id', 'requested_at'),
    )
