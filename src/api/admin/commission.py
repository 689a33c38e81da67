"""Admin commission cache endpoints."""

import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import require_owner
from src.db import get_db
from src.models import AuditAction, User
from src.schemas.commission import DataUpdateCheck
from src.schemas.dashboard import (
    CommissionRangeRefreshRequest,
    CommissionRangeRefreshResponse,
    CommissionRefreshRequest,
    CommissionRefreshResponse,
    CommissionSummary,
    ConsistencyReport,
    DataRange,
    StoredCommissionResponse,
)
from src.services import commission_cache, record_store
from src.utils.audit import get_client_ip, log_action
from src.utils.dates import business_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/commission")


@router.post("/refresh", response_model=CommissionRefreshResponse)
async def refresh_commission(
    request: Request,
    data: CommissionRefreshRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
):
    """Recompute one day's commission and replace the stored records."""
    records = await commission_cache.refresh_commission(
        db, data.date, advertiser=data.advertiser
    )

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.REFRESH_COMMISSION,
        target_type="commission",
        action_metadata={
            "date": data.date.isoformat(),
            "advertiser": data.advertiser,
            "records": len(records),
        },
        ip_address=get_client_ip(request),
    )

    return CommissionRefreshResponse(
        date=data.date,
        records_calculated=len(records),
        commission_records=records,
    )


@router.post("/refresh-range", response_model=CommissionRangeRefreshResponse)
async def refresh_commission_range(
    request: Request,
    data: CommissionRangeRefreshRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
):
    """Recompute every day in a range."""
    results = await commission_cache.refresh_range(db, data.start, data.end)
    per_day = {day.isoformat(): len(records) for day, records in results.items()}

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.REFRESH_COMMISSION,
        target_type="commission",
        action_metadata={"start": data.start.isoformat(), "end": data.end.isoformat()},
        ip_address=get_client_ip(request),
    )

    return CommissionRangeRefreshResponse(
        days=len(per_day),
        records_calculated=sum(per_day.values()),
        per_day=per_day,
    )


@router.get("/records", response_model=List[StoredCommissionResponse])
async def list_commission_records(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    date: Optional[datetime.date] = Query(None),
    advertiser: Optional[str] = Query(None),
    start: Optional[datetime.date] = Query(None),
    end: Optional[datetime.date] = Query(None),
):
    """Stored commission records, newest first."""
    rows = await commission_cache.get_commission_records(
        db, day=date, advertiser=advertiser, start=start, end=end
    )
    return [StoredCommissionResponse.model_validate(row) for row in rows]


@router.get("/summary", response_model=List[CommissionSummary])
async def monthly_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    month: str = Query(..., description="YYYY-MM"),
):
    """Month totals per operator from the stored daily records."""
    return await commission_cache.get_monthly_summary(db, month)


@router.get("/range", response_model=DataRange)
async def data_range(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    month: str = Query(..., description="YYYY-MM"),
):
    return await commission_cache.get_data_range(db, month)


@router.get("/dates", response_model=List[datetime.date])
async def available_dates(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    month: str = Query(..., description="YYYY-MM"),
):
    """Days in the month that have stored records, newest first."""
    return await commission_cache.get_available_dates(db, month)


@router.get("/updates", response_model=DataUpdateCheck)
async def check_updates(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    date: Optional[datetime.date] = Query(None),
    since: Optional[datetime.datetime] = Query(None),
):
    """Whether a day's ad data changed since the given time."""
    return await record_store.has_updates_since(db, date or business_today(), since)


@router.get("/consistency", response_model=ConsistencyReport)
async def check_consistency(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
    date: Optional[datetime.date] = Query(None),
):
    """Compare stored commission against a fresh computation."""
    return await commission_cache.validate_consistency(db, date or business_today())
