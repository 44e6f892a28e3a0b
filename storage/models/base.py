"""
Base ORM Model and Column Types.

============================================================
PURPOSE
============================================================
Provides the declarative base and the exact numeric column
types used by all entity models.

============================================================
COMPONENTS
============================================================
- Base: SQLAlchemy declarative base for all models
- RawAmount: arbitrary-precision integer (uint256 and below)
- DecimalAmount: exact decimal display value
- TimestampMixin: bookkeeping timestamp columns

On PostgreSQL amounts live in NUMERIC columns. Other dialects
(SQLite in tests and dry runs) have no exact type wide enough,
so values are stored as their decimal string.

============================================================
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base for all ORM models.

    All entity models inherit from this base.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class RawAmount(TypeDecorator):
    """Signed integer of up to 78 digits, stored exactly."""

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(Numeric(precision=78, scale=0))
        return dialect.type_descriptor(String(80))

    def process_bind_param(self, value: Optional[int], dialect) -> Any:
        if value is None:
            return None
        if dialect.name == "postgresql":
            return Decimal(int(value))
        return str(int(value))

    def process_result_value(self, value: Any, dialect) -> Optional[int]:
        if value is None:
            return None
        return int(value)


class DecimalAmount(TypeDecorator):
    """Exact decimal value, stored without float conversion."""

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(Numeric(asdecimal=True))
        return dialect.type_descriptor(String(160))

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Any:
        if value is None:
            return None
        if dialect.name == "postgresql":
            return Decimal(value)
        return str(value)

    def process_result_value(self, value: Any, dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value) if not isinstance(value, Decimal) else value


class TimestampMixin:
    """
    Mixin providing bookkeeping timestamp columns.

    These are store metadata, not chain data: entity state is a
    function of the event log only.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="Record creation timestamp (UTC)"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        comment="Last update timestamp (UTC)"
    )
