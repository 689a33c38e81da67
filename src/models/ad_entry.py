"""
Daily ad data entry, one row per (date, operator).
"""

import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import BaseModel


class AdDataEntry(BaseModel):
    """
    Operator-submitted daily figures.

    Column names follow the Supabase table the dashboard has always
    written to; src.services.record_store maps them onto DailyEntry.
    """

    __tablename__ = "ad_data_entries"
    __table_args__ = (
        UniqueConstraint("date", "staff", name="uq_ad_data_entries_date_staff"),
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    staff: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="Operator identifier",
    )
    ad_spend: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        default=Decimal("0"),
        comment="Ad spend in USD",
    )
    credit_card_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(14, 2),
        nullable=True,
        default=Decimal("0"),
        comment="Credit-card revenue in MXN",
    )
    payment_info_count: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        default=0,
    )
    credit_card_orders: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        default=0,
    )
    created_by_user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<AdDataEntry(id={self.id}, date={self.date}, staff='{self.staff}')>"
