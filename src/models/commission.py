"""
Stored commission records.

This table is a cache of the commission pipeline's output per
(date, advertiser). It is only ever replaced wholesale for a scope,
never patched row by row.
"""

import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, DateTime, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import BaseModel


class CommissionStatus(str, Enum):
    """Outcome of the commission tier lookup."""
    CALCULATED = "calculated"
    NO_COMMISSION = "no_commission"
    # Placeholder for roster members without a record
    NO_DATA = "no_data"


class StoredCommission(BaseModel):
    """Daily commission result for one advertiser."""

    __tablename__ = "commission_records"
    __table_args__ = (
        UniqueConstraint("date", "advertiser", name="uq_commission_records_date_advertiser"),
    )

    advertiser: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )
    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    order_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    roi: Mapped[Decimal] = mapped_column(
        Numeric(24, 4),
        nullable=False,
        default=Decimal("0"),
    )
    commission_per_order: Mapped[Decimal] = mapped_column(
        Numeric(8, 2),
        nullable=False,
        default=Decimal("0"),
        comment="RMB per order",
    )
    total_commission: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0"),
        comment="RMB",
    )
    commission_status: Mapped[CommissionStatus] = mapped_column(
        SQLAlchemyEnum(
            CommissionStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    calculated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<StoredCommission(date={self.date}, advertiser='{self.advertiser}', "
            f"total={self.total_commission})>"
        )
