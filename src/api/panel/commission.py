"""Operator panel: leaderboard and today's commission."""

import datetime
from decimal import Decimal
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import require_operator
from src.config import settings
from src.db import get_db
from src.models import User
from src.schemas.dashboard import (
    LeaderboardResponse,
    RealtimeCommissionResponse,
    TodayCommissionResponse,
)
from src.services import commission_cache, record_store
from src.services.exceptions import InvalidPeriodError
from src.services.pipeline import build_leaderboard, compute_realtime, month_bounds
from src.utils.dates import business_today

router = APIRouter()


def resolve_period(
    month: Optional[str],
    start: Optional[datetime.date],
    end: Optional[datetime.date],
) -> Tuple[datetime.date, datetime.date]:
    """An explicit start/end wins over month; default is the current month."""
    if start or end:
        if not (start and end):
            raise InvalidPeriodError("Both start and end are required")
        return start, end
    if month:
        return month_bounds(month)
    return month_bounds(business_today().strftime("%Y-%m"))


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    start: Optional[datetime.date] = Query(None),
    end: Optional[datetime.date] = Query(None),
):
    """Commission leaderboard, recomputed from ad data on every request."""
    period_start, period_end = resolve_period(month, start, end)
    operators = settings.commission_operators

    entries = await record_store.fetch_entries(db, period_start, period_end, operators)
    items = build_leaderboard(
        entries,
        period_start,
        period_end,
        settings.fx_rate,
        operators=operators,
    )

    return LeaderboardResponse(
        period_start=period_start,
        period_end=period_end,
        fx_rate=Decimal(str(settings.fx_rate)),
        items=items,
    )


@router.get("/commission/today", response_model=TodayCommissionResponse)
async def get_today_commission(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
):
    """Stored commission for today, one row per commission operator."""
    today = business_today()
    rows = await commission_cache.get_commission_records(db, day=today)
    update_info = await record_store.get_last_update(db, today)

    return TodayCommissionResponse(
        date=today,
        data=commission_cache.complete_roster(rows, today),
        update_info=update_info,
    )


@router.get("/commission/realtime", response_model=RealtimeCommissionResponse)
async def get_realtime_commission(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
    date: Optional[datetime.date] = Query(None),
):
    """Commission computed straight from ad data, without storing it."""
    day = date or business_today()
    operators = settings.commission_operators
    entries = await record_store.fetch_entries(db, day, day, operators)

    return RealtimeCommissionResponse(
        date=day,
        fx_rate=Decimal(str(settings.fx_rate)),
        data=compute_realtime(entries, day, settings.fx_rate, operators),
    )
