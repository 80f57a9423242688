# household_ledger/shared/database/models.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Boolean, DateTime, Float, Text,
    ForeignKey, Enum, CheckConstraint, func
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def generate_id() -> str:
    return str(uuid.uuid4())


# =====================================================
# ENUMS
# =====================================================

class ExpenseCategory(str, enum.Enum):
    RENT = "RENT"
    UTILITIES = "UTILITIES"
    GROCERIES = "GROCERIES"
    FOOD = "FOOD"
    CLEANING = "CLEANING"
    INTERNET = "INTERNET"
    TRANSPORT = "TRANSPORT"
    ENTERTAINMENT = "ENTERTAINMENT"
    OTHER = "OTHER"


class SplitType(str, enum.Enum):
    EQUAL = "EQUAL"


# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# PISOS Y USUARIOS
# =====================================================

class Household(Base, TimestampMixin):
    """Modelo de Piso compartido"""
    __tablename__ = "households"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)

    # Relationships
    expenses = relationship("Expense", back_populates="household", cascade="all, delete-orphan")


class User(Base, TimestampMixin):
    """Modelo de Usuario"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)

    # Relationships
    created_expenses = relationship("Expense", back_populates="creator")
    splits = relationship("ExpenseSplit", back_populates="user")


# =====================================================
# GASTOS
# =====================================================

class Expense(Base, TimestampMixin):
    """Modelo de Gasto compartido"""
    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    household_id = Column(String(36), ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Enum(ExpenseCategory, name="expense_category"), nullable=False, default=ExpenseCategory.OTHER)
    split_type = Column(Enum(SplitType, name="split_type"), nullable=False, default=SplitType.EQUAL)
    date = Column(DateTime, nullable=False, default=datetime.now, index=True)

    # Relationships
    household = relationship("Household", back_populates="expenses")
    creator = relationship("User", back_populates="created_expenses")
    splits = relationship(
        "ExpenseSplit",
        back_populates="expense",
        cascade="all, delete-orphan"
    )


class ExpenseSplit(Base, TimestampMixin):
    """Parte de un gasto que debe cada usuario"""
    __tablename__ = "expense_splits"

    id = Column(String(36), primary_key=True, default=generate_id)
    expense_id = Column(String(36), ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount_owed = Column(Float, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)

    # Relationships
    expense = relationship("Expense", back_populates="splits")
    user = relationship("User", back_populates="splits")
