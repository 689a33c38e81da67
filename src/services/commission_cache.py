"""
Stored commission records: refresh, queries and summaries.

The commission_records table caches the pipeline's per-day output. A
refresh recomputes a day from ad_data_entries and replaces the stored
rows for that scope. Delete and insert run inside one SAVEPOINT, so the
scope is never observed empty by other transactions and a failed insert
leaves the previous rows in place.
"""

import datetime
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models import CommissionStatus, StoredCommission
from src.schemas.commission import CommissionRecord
from src.schemas.dashboard import (
    CommissionSummary,
    ConsistencyIssue,
    ConsistencyReport,
    DataRange,
)
from src.services.aggregator import Rate, aggregate
from src.services.commission import compute_commission, round_roi
from src.services.exceptions import CommissionRefreshError, InvalidPeriodError
from src.services.pipeline import month_bounds
from src.services.record_store import check_operator, fetch_entries

logger = logging.getLogger(__name__)

MONEY = Decimal("0.01")


def _roster(operators: Optional[Sequence[str]]) -> List[str]:
    return list(settings.commission_operators if operators is None else operators)


def _rate(fx_rate: Optional[Rate]) -> Rate:
    return settings.fx_rate if fx_rate is None else fx_rate


def to_stored(record: CommissionRecord, day: datetime.date) -> StoredCommission:
    return StoredCommission(
        advertiser=record.operator,
        date=day,
        order_count=record.order_count,
        roi=round_roi(record.roi),
        commission_per_order=record.commission_per_order.quantize(MONEY),
        total_commission=record.total_commission.quantize(MONEY),
        commission_status=record.status,
        calculated_at=datetime.datetime.now(datetime.timezone.utc),
    )


def from_stored(row: StoredCommission) -> CommissionRecord:
    return CommissionRecord(
        operator=row.advertiser,
        period_start=row.date,
        period_end=row.date,
        order_count=row.order_count,
        roi=Decimal(row.roi),
        commission_per_order=Decimal(row.commission_per_order),
        total_commission=Decimal(row.total_commission),
        status=row.commission_status,
    )


async def compute_day(
    db: AsyncSession,
    day: datetime.date,
    fx_rate: Optional[Rate] = None,
    operators: Optional[Sequence[str]] = None,
) -> List[CommissionRecord]:
    """Fresh commission records for one day, without touching the cache."""
    scope = _roster(operators)
    entries = await fetch_entries(db, day, day, scope)
    return [
        compute_commission(agg)
        for agg in aggregate(entries, day, day, _rate(fx_rate))
    ]


async def refresh_commission(
    db: AsyncSession,
    day: datetime.date,
    advertiser: Optional[str] = None,
    fx_rate: Optional[Rate] = None,
    operators: Optional[Sequence[str]] = None,
) -> List[CommissionRecord]:
    """Recompute and replace the stored records for a day.

    Args:
        db: Database session; the caller commits
        day: Day to recompute
        advertiser: Limit the refresh to one operator
        fx_rate: MXN per USD, defaults to settings.fx_rate
        operators: Commission roster, defaults to settings.commission_operators

    Returns:
        The freshly computed records

    Raises:
        UnknownOperatorError: advertiser is not on the roster
        CommissionRefreshError: the replace failed and was rolled back
    """
    roster = _roster(operators)
    if advertiser is not None:
        check_operator(advertiser, roster)
        scope = [advertiser]
    else:
        scope = roster

    records = await compute_day(db, day, fx_rate, scope)

    try:
        async with db.begin_nested():
            await db.execute(
                delete(StoredCommission).where(
                    StoredCommission.date == day,
                    StoredCommission.advertiser.in_(scope),
                )
            )
            db.add_all([to_stored(record, day) for record in records])
            await db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Commission refresh for {day} failed: {e}")
        raise CommissionRefreshError(
            "Failed to replace commission records",
            str(e),
            day=day,
            advertiser=advertiser,
        ) from e

    logger.info(f"Commission refreshed for {day}: {len(records)} records")
    return records


async def refresh_range(
    db: AsyncSession,
    start: datetime.date,
    end: datetime.date,
    fx_rate: Optional[Rate] = None,
    operators: Optional[Sequence[str]] = None,
) -> Dict[datetime.date, List[CommissionRecord]]:
    """Refresh every day from start to end inclusive."""
    if start > end:
        raise InvalidPeriodError("Period start is after period end", f"{start} > {end}")

    results = {}
    day = start
    while day <= end:
        results[day] = await refresh_commission(
            db, day, fx_rate=fx_rate, operators=operators
        )
        day += datetime.timedelta(days=1)
    return results


async def get_commission_records(
    db: AsyncSession,
    day: Optional[datetime.date] = None,
    advertiser: Optional[str] = None,
    start: Optional[datetime.date] = None,
    end: Optional[datetime.date] = None,
    operators: Optional[Sequence[str]] = None,
) -> List[StoredCommission]:
    """Stored records matching the filters, newest date first."""
    query = select(StoredCommission).where(
        StoredCommission.advertiser.in_(_roster(operators))
    )

    if day:
        query = query.where(StoredCommission.date == day)
    if advertiser:
        query = query.where(StoredCommission.advertiser == advertiser)
    if start:
        query = query.where(StoredCommission.date >= start)
    if end:
        query = query.where(StoredCommission.date <= end)

    query = query.order_by(StoredCommission.date.desc(), StoredCommission.advertiser)
    result = await db.execute(query)
    return list(result.scalars().all())


def complete_roster(
    rows: Iterable[StoredCommission],
    day: datetime.date,
    operators: Optional[Sequence[str]] = None,
) -> List[CommissionRecord]:
    """One record per roster member, zero-filled with status no_data."""
    by_operator = {row.advertiser: row for row in rows}

    completed = []
    for operator in _roster(operators):
        row = by_operator.get(operator)
        if row is not None:
            completed.append(from_stored(row))
            continue
        completed.append(
            CommissionRecord(
                operator=operator,
                period_start=day,
                period_end=day,
                order_count=0,
                roi=Decimal("0"),
                commission_per_order=Decimal("0"),
                total_commission=Decimal("0"),
                status=CommissionStatus.NO_DATA,
            )
        )
    return completed


async def get_monthly_summary(
    db: AsyncSession,
    month: str,
    operators: Optional[Sequence[str]] = None,
) -> List[CommissionSummary]:
    """Per-operator totals of the stored daily records in a month."""
    start, end = month_bounds(month)
    roster = _roster(operators)
    rows = await get_commission_records(db, start=start, end=end, operators=roster)

    grouped: Dict[str, List[StoredCommission]] = {op: [] for op in roster}
    for row in rows:
        grouped[row.advertiser].append(row)

    summary = []
    for operator, records in grouped.items():
        if not records:
            summary.append(CommissionSummary(operator=operator))
            continue
        total_roi = sum((Decimal(r.roi) for r in records), Decimal("0"))
        summary.append(
            CommissionSummary(
                operator=operator,
                total_commission=sum(
                    (Decimal(r.total_commission) for r in records), Decimal("0")
                ),
                total_orders=sum(r.order_count for r in records),
                working_days=len(records),
                avg_roi=total_roi / len(records),
            )
        )
    return summary


async def get_available_dates(
    db: AsyncSession,
    month: str,
    operators: Optional[Sequence[str]] = None,
) -> List[datetime.date]:
    """Distinct days in a month that have stored records, newest first."""
    start, end = month_bounds(month)
    result = await db.execute(
        select(StoredCommission.date)
        .where(
            StoredCommission.advertiser.in_(_roster(operators)),
            StoredCommission.date >= start,
            StoredCommission.date <= end,
        )
        .distinct()
        .order_by(StoredCommission.date.desc())
    )
    return list(result.scalars().all())


async def get_data_range(
    db: AsyncSession,
    month: str,
    operators: Optional[Sequence[str]] = None,
) -> DataRange:
    dates = await get_available_dates(db, month, operators)
    if not dates:
        return DataRange()
    return DataRange(start_date=dates[-1], end_date=dates[0], total_days=len(dates))


async def validate_consistency(
    db: AsyncSession,
    day: datetime.date,
    fx_rate: Optional[Rate] = None,
    operators: Optional[Sequence[str]] = None,
) -> ConsistencyReport:
    """Compare stored records for a day against a fresh computation."""
    roster = _roster(operators)
    expected = {r.operator: r for r in await compute_day(db, day, fx_rate, roster)}
    stored = {
        row.advertiser: from_stored(row)
        for row in await get_commission_records(db, day=day, operators=roster)
    }

    issues = []
    for operator in roster:
        fresh = expected.get(operator)
        cached = stored.get(operator)
        if fresh is None and cached is None:
            continue
        if fresh is None or cached is None:
            issues.append(
                ConsistencyIssue(
                    operator=operator,
                    field="record",
                    stored="present" if cached else None,
                    expected="present" if fresh else None,
                )
            )
            continue

        comparisons = (
            ("order_count", cached.order_count, fresh.order_count),
            ("roi", round_roi(cached.roi), round_roi(fresh.roi)),
            ("total_commission", cached.total_commission, fresh.total_commission),
        )
        for field, stored_value, expected_value in comparisons:
            if stored_value != expected_value:
                issues.append(
                    ConsistencyIssue(
                        operator=operator,
                        field=field,
                        stored=str(stored_value),
                        expected=str(expected_value),
                    )
                )

    if issues:
        logger.warning(f"Commission cache for {day} has {len(issues)} inconsistencies")

    return ConsistencyReport(
        date=day,
        consistent=not issues,
        checked_operators=roster,
        issues=issues,
    )
