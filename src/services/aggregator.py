"""
Per-operator aggregation of daily ad data over a period.

Revenue is converted to USD row by row before summing, so many small
entries do not accumulate conversion drift. With a single fx_rate the
result equals converting the MXN total once; entries recorded under
different historical rates are not supported.
"""

import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Union

from src.schemas.commission import DailyEntry, OperatorAggregate
from src.services.exceptions import InvalidPeriodError, InvalidRateError

Rate = Union[Decimal, float, int, str]


def to_rate(fx_rate: Rate) -> Decimal:
    """Normalize an exchange rate to a positive Decimal."""
    rate = fx_rate if isinstance(fx_rate, Decimal) else Decimal(str(fx_rate))
    if not rate > 0:
        raise InvalidRateError("Exchange rate must be positive", str(fx_rate))
    return rate


def aggregate(
    entries: Iterable[DailyEntry],
    period_start: datetime.date,
    period_end: datetime.date,
    fx_rate: Rate,
) -> List[OperatorAggregate]:
    """Sum spend, converted revenue and orders per operator.

    Args:
        entries: Daily entries in any order
        period_start: First day included
        period_end: Last day included
        fx_rate: MXN per USD

    Returns:
        One aggregate per operator that has at least one entry in the
        period, in order of first appearance. Operators without entries
        are not emitted.
    """
    if period_start > period_end:
        raise InvalidPeriodError(
            "Period start is after period end",
            f"{period_start} > {period_end}",
        )
    rate = to_rate(fx_rate)

    totals: Dict[str, dict] = {}
    for entry in entries:
        if not period_start <= entry.date <= period_end:
            continue

        bucket = totals.get(entry.operator)
        if bucket is None:
            bucket = totals[entry.operator] = {
                "spend": Decimal("0"),
                "revenue": Decimal("0"),
                "orders": 0,
            }

        bucket["spend"] += entry.ad_spend
        bucket["revenue"] += entry.credit_card_amount / rate
        bucket["orders"] += entry.order_count

    return [
        OperatorAggregate(
            operator=operator,
            period_start=period_start,
            period_end=period_end,
            total_spend=bucket["spend"],
            total_revenue_converted=bucket["revenue"],
            total_orders=bucket["orders"],
        )
        for operator, bucket in totals.items()
    ]
