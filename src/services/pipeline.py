"""
End-to-end commission pipeline: aggregate -> commission -> rank.

Every call recomputes from the entries it is given; nothing is kept
between calls.
"""

import calendar
import datetime
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from src.schemas.commission import DailyEntry, RankedEntry, RealtimeCommission
from src.services.aggregator import Rate, aggregate
from src.services.commission import compute_commission, status_text
from src.services.exceptions import InvalidPeriodError
from src.services.ranking import rank

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def month_bounds(month: str) -> Tuple[datetime.date, datetime.date]:
    """Return the first and last day of a 'YYYY-MM' month."""
    match = MONTH_PATTERN.match(month or "")
    if not match:
        raise InvalidPeriodError("Month must be formatted as YYYY-MM", month)

    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12:
        raise InvalidPeriodError("Month out of range", month)

    last_day = calendar.monthrange(year, month_number)[1]
    return (
        datetime.date(year, month_number, 1),
        datetime.date(year, month_number, last_day),
    )


def build_leaderboard(
    entries: Iterable[DailyEntry],
    period_start: datetime.date,
    period_end: datetime.date,
    fx_rate: Rate,
    operators: Optional[Sequence[str]] = None,
) -> List[RankedEntry]:
    """Rank operators by commission earned over a period.

    Args:
        entries: Daily entries (may include rows outside the period)
        period_start: First day included
        period_end: Last day included
        fx_rate: MXN per USD
        operators: Restrict the board to these operators

    Returns:
        Ranked rows, rank 1 first
    """
    aggregates = aggregate(entries, period_start, period_end, fx_rate)
    if operators is not None:
        allowed = set(operators)
        aggregates = [a for a in aggregates if a.operator in allowed]

    return rank(compute_commission(a) for a in aggregates)


def compute_realtime(
    entries: Iterable[DailyEntry],
    day: datetime.date,
    fx_rate: Rate,
    operators: Optional[Sequence[str]] = None,
) -> List[RealtimeCommission]:
    """One day's commission per operator, labelled for display, not persisted."""
    aggregates = aggregate(entries, day, day, fx_rate)

    results = []
    for agg in aggregates:
        if operators is not None and agg.operator not in operators:
            continue
        record = compute_commission(agg)
        results.append(
            RealtimeCommission(
                **record.model_dump(),
                status_text=status_text(record.roi),
            )
        )
    return results
