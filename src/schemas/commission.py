"""
Canonical commission pipeline types.

These are the only shapes the aggregator, rule engine and ranking engine
accept. Rows from the database are converted by src.services.record_store
before they get here.
"""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.models.commission import CommissionStatus


class DailyEntry(BaseModel):
    """One operator's figures for one day."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    operator: str = Field(..., min_length=1, max_length=20)
    # Bounds match the ad_data_entries columns
    ad_spend: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)  # USD
    credit_card_amount: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)  # MXN
    order_count: int = Field(..., ge=0, le=2_147_483_647)


class OperatorAggregate(BaseModel):
    """Period totals for one operator, revenue already in USD."""

    model_config = ConfigDict(frozen=True)

    operator: str
    period_start: datetime.date
    period_end: datetime.date
    total_spend: Decimal
    total_revenue_converted: Decimal
    total_orders: int

    @property
    def roi(self) -> Decimal:
        if self.total_spend > 0:
            return self.total_revenue_converted / self.total_spend
        return Decimal("0")


class CommissionRecord(BaseModel):
    """Commission outcome for one operator over one period."""

    model_config = ConfigDict(frozen=True)

    operator: str
    period_start: datetime.date
    period_end: datetime.date
    order_count: int
    roi: Decimal
    commission_per_order: Decimal
    total_commission: Decimal
    status: CommissionStatus


class RankTier(BaseModel):
    """Cosmetic title band attached to a leaderboard position."""

    model_config = ConfigDict(frozen=True)

    title: str
    privilege: str
    emoji: str


class RankedEntry(CommissionRecord):
    """Leaderboard row."""

    rank: int = Field(..., ge=1)
    tier: RankTier

    @computed_field
    @property
    def tier_title(self) -> str:
        return self.tier.title


class RealtimeCommission(CommissionRecord):
    """Commission computed on the fly, with the label shown on the dashboard."""

    status_text: str


class DataUpdateInfo(BaseModel):
    """Freshness of one day's ad data."""

    last_update: datetime.datetime
    record_count: int
    operators: list[str]


class DataUpdateCheck(BaseModel):
    has_update: bool
    update_info: Optional[DataUpdateInfo] = None
