"""
Access to the ad_data_entries table.

This is the only place that knows the Supabase column names. Rows leave
this module as DailyEntry objects for the commission pipeline, or as
AdDataEntry rows for the CRUD endpoints.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models import AdDataEntry
from src.schemas.ad_entry import AdEntryCreate, AdEntryUpdate
from src.schemas.commission import DailyEntry, DataUpdateCheck, DataUpdateInfo
from src.services.exceptions import UnknownOperatorError

logger = logging.getLogger(__name__)


def to_daily_entry(row) -> DailyEntry:
    """Map a stored row onto the canonical DailyEntry.

    staff -> operator, credit_card_orders -> order_count. Missing numeric
    columns count as zero; a missing date or staff fails validation.
    """
    return DailyEntry(
        date=row.date,
        operator=row.staff,
        ad_spend=row.ad_spend if row.ad_spend is not None else Decimal("0"),
        credit_card_amount=(
            row.credit_card_amount if row.credit_card_amount is not None else Decimal("0")
        ),
        order_count=row.credit_card_orders or 0,
    )


def check_operator(operator: str, roster: Optional[Sequence[str]] = None) -> None:
    roster = settings.operators if roster is None else roster
    if operator not in roster:
        raise UnknownOperatorError(operator)


async def list_entries(
    db: AsyncSession,
    start: Optional[datetime.date] = None,
    end: Optional[datetime.date] = None,
    operators: Optional[Sequence[str]] = None,
) -> List[AdDataEntry]:
    """Entries matching the filters, newest date first."""
    query = select(AdDataEntry)

    if start:
        query = query.where(AdDataEntry.date >= start)
    if end:
        query = query.where(AdDataEntry.date <= end)
    if operators is not None:
        query = query.where(AdDataEntry.staff.in_(list(operators)))

    query = query.order_by(AdDataEntry.date.desc(), AdDataEntry.staff)
    result = await db.execute(query)
    return list(result.scalars().all())


async def fetch_entries(
    db: AsyncSession,
    start: datetime.date,
    end: datetime.date,
    operators: Optional[Sequence[str]] = None,
) -> List[DailyEntry]:
    """Load a period's entries in canonical form."""
    rows = await list_entries(db, start=start, end=end, operators=operators)
    return [to_daily_entry(row) for row in rows]


async def get_entry(db: AsyncSession, entry_id: int) -> Optional[AdDataEntry]:
    return await db.get(AdDataEntry, entry_id)


async def _find_entry(
    db: AsyncSession,
    day: datetime.date,
    staff: str,
) -> Optional[AdDataEntry]:
    result = await db.execute(
        select(AdDataEntry).where(
            AdDataEntry.date == day,
            AdDataEntry.staff == staff,
        )
    )
    return result.scalar_one_or_none()


async def _write_entry(
    db: AsyncSession,
    data: AdEntryCreate,
    user_id: Optional[int],
) -> Tuple[AdDataEntry, bool]:
    entry = await _find_entry(db, data.date, data.staff)
    created = entry is None

    if created:
        entry = AdDataEntry(
            date=data.date,
            staff=data.staff,
            created_by_user_id=user_id,
        )
        db.add(entry)

    entry.ad_spend = data.ad_spend
    entry.credit_card_amount = data.credit_card_amount
    entry.payment_info_count = data.payment_info_count
    entry.credit_card_orders = data.credit_card_orders

    await db.flush()
    return entry, created


async def upsert_entry(
    db: AsyncSession,
    data: AdEntryCreate,
    user_id: Optional[int] = None,
    roster: Optional[Sequence[str]] = None,
) -> Tuple[AdDataEntry, bool]:
    """Insert or overwrite the entry for (date, staff).

    Returns:
        (entry, created) where created is False when an existing row
        was overwritten
    """
    check_operator(data.staff, roster)

    try:
        async with db.begin_nested():
            entry, created = await _write_entry(db, data, user_id)
    except IntegrityError:
        # A concurrent submission inserted (date, staff) first; overwrite it
        logger.info(f"Concurrent insert of ad entry {data.date} / {data.staff}, retrying as update")
        async with db.begin_nested():
            entry, created = await _write_entry(db, data, user_id)

    await db.refresh(entry)

    logger.info(
        f"{'Created' if created else 'Updated'} ad entry {entry.date} / {entry.staff}"
    )
    return entry, created


async def update_entry(
    db: AsyncSession,
    entry: AdDataEntry,
    data: AdEntryUpdate,
) -> AdDataEntry:
    """Apply the fields set on data to an existing entry."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(entry, field, value)

    await db.flush()
    await db.refresh(entry)
    return entry


async def delete_entry(db: AsyncSession, entry: AdDataEntry) -> None:
    logger.info(f"Deleting ad entry {entry.date} / {entry.staff}")
    await db.delete(entry)
    await db.flush()


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    # SQLite hands back naive timestamps
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


async def get_last_update(
    db: AsyncSession,
    day: datetime.date,
    operators: Optional[Sequence[str]] = None,
) -> Optional[DataUpdateInfo]:
    """Latest modification time among one day's entries."""
    operators = settings.commission_operators if operators is None else operators
    touched = func.coalesce(AdDataEntry.updated_at, AdDataEntry.created_at)

    result = await db.execute(
        select(AdDataEntry.staff, touched.label("touched_at"))
        .where(
            AdDataEntry.date == day,
            AdDataEntry.staff.in_(list(operators)),
        )
        .order_by(AdDataEntry.staff)
    )
    rows = result.all()
    if not rows:
        return None

    return DataUpdateInfo(
        last_update=max(_as_utc(row.touched_at) for row in rows),
        record_count=len(rows),
        operators=[row.staff for row in rows],
    )


async def has_updates_since(
    db: AsyncSession,
    day: datetime.date,
    since: Optional[datetime.datetime] = None,
    operators: Optional[Sequence[str]] = None,
) -> DataUpdateCheck:
    """Whether the day's data changed after `since`.

    With no reference time, or no data at all, callers should reload.
    """
    info = await get_last_update(db, day, operators)
    if info is None or since is None:
        return DataUpdateCheck(has_update=True, update_info=info)

    return DataUpdateCheck(
        has_update=info.last_update > _as_utc(since),
        update_info=info,
    )
