"""Commission dashboard request/response schemas."""

import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from src.schemas.commission import (
    CommissionRecord,
    DataUpdateInfo,
    RankedEntry,
    RealtimeCommission,
)


class CommissionRefreshRequest(BaseModel):
    """Recompute stored commission for one day."""

    date: datetime.date
    advertiser: Optional[str] = Field(None, min_length=1, max_length=20)


class CommissionRangeRefreshRequest(BaseModel):
    """Recompute stored commission for every day in a range."""

    start: datetime.date
    end: datetime.date

    @model_validator(mode="after")
    def check_order(self) -> "CommissionRangeRefreshRequest":
        if self.start > self.end:
            raise ValueError("start must not be after end")
        if (self.end - self.start).days > 92:
            raise ValueError("range is limited to 93 days")
        return self


class CommissionRefreshResponse(BaseModel):
    success: bool = True
    date: datetime.date
    records_calculated: int
    commission_records: List[CommissionRecord]


class CommissionRangeRefreshResponse(BaseModel):
    success: bool = True
    days: int
    records_calculated: int
    per_day: Dict[str, int]


class StoredCommissionResponse(BaseModel):
    """Stored commission row as returned to the dashboard."""

    id: int
    advertiser: str
    date: datetime.date
    order_count: int
    roi: Decimal
    commission_per_order: Decimal
    total_commission: Decimal
    commission_status: str
    calculated_at: datetime.datetime

    model_config = {"from_attributes": True}


class TodayCommissionResponse(BaseModel):
    date: datetime.date
    data: List[CommissionRecord]
    update_info: Optional[DataUpdateInfo] = None


class RealtimeCommissionResponse(BaseModel):
    date: datetime.date
    fx_rate: Decimal
    data: List[RealtimeCommission]


class LeaderboardResponse(BaseModel):
    period_start: datetime.date
    period_end: datetime.date
    fx_rate: Decimal
    items: List[RankedEntry]


class CommissionSummary(BaseModel):
    """Month-to-date totals for one operator, from stored daily records."""

    operator: str
    total_commission: Decimal = Decimal("0")
    total_orders: int = 0
    working_days: int = 0
    avg_roi: Decimal = Decimal("0")


class DataRange(BaseModel):
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    total_days: int = 0


class ConsistencyIssue(BaseModel):
    operator: str
    field: str
    stored: Optional[str] = None
    expected: Optional[str] = None


class ConsistencyReport(BaseModel):
    date: datetime.date
    consistent: bool
    checked_operators: List[str]
    issues: List[ConsistencyIssue]


class AuditLogResponse(BaseModel):
    """Audit log entry for admin view."""

    id: int
    user_id: int
    username: str
    display_name: str
    action: str
    target_type: Optional[str]
    target_id: Optional[int]
    metadata: Optional[dict]
    ip_address: Optional[str]
    created_at: datetime.datetime


class AuditLogListResponse(BaseModel):
    """Paginated audit log."""

    items: List[AuditLogResponse]
    total: int
    page: int
    per_page: int
    pages: int
