"""
Tiered ROI commission.

Rules (per order, RMB):
- ROI >= 1.0: 7
- 0.8 <= ROI < 1.0: 5
- ROI < 0.8: 0, status no_commission

ROI is compared after rounding to 4 decimal places so a true 1.0 that
arrives as 0.99999999 still lands in the top tier. The stored ROI is
never rounded here.
"""

from decimal import ROUND_HALF_UP, Decimal

from src.models.commission import CommissionStatus
from src.schemas.commission import CommissionRecord, OperatorAggregate

ROI_PRECISION = Decimal("0.0001")

HIGH_ROI_THRESHOLD = Decimal("1.0")
BASE_ROI_THRESHOLD = Decimal("0.8")

HIGH_TIER_PER_ORDER = Decimal("7")
BASE_TIER_PER_ORDER = Decimal("5")
NO_COMMISSION = Decimal("0")

STATUS_TEXT_HIGH = "高效投放"
STATUS_TEXT_BASE = "合格投放"
STATUS_TEXT_NONE = "跑了个锤子"


def calculate_roi(total_revenue: Decimal, total_spend: Decimal) -> Decimal:
    """Revenue over spend; zero spend means ROI 0 rather than an error."""
    if total_spend > 0:
        return total_revenue / total_spend
    return Decimal("0")


def round_roi(roi: Decimal) -> Decimal:
    return roi.quantize(ROI_PRECISION, rounding=ROUND_HALF_UP)


def commission_per_order(roi: Decimal) -> Decimal:
    """Map an ROI to the flat per-order bonus."""
    rounded = round_roi(roi)
    if rounded >= HIGH_ROI_THRESHOLD:
        return HIGH_TIER_PER_ORDER
    if rounded >= BASE_ROI_THRESHOLD:
        return BASE_TIER_PER_ORDER
    return NO_COMMISSION


def status_text(roi: Decimal) -> str:
    """Dashboard label for the tier an ROI falls into."""
    rate = commission_per_order(roi)
    if rate == HIGH_TIER_PER_ORDER:
        return STATUS_TEXT_HIGH
    if rate == BASE_TIER_PER_ORDER:
        return STATUS_TEXT_BASE
    return STATUS_TEXT_NONE


def compute_commission(aggregate: OperatorAggregate) -> CommissionRecord:
    """Turn one operator's period totals into a commission record.

    Inputs are expected to be non-negative; the aggregator only ever
    produces sums of validated entries.
    """
    roi = calculate_roi(aggregate.total_revenue_converted, aggregate.total_spend)
    per_order = commission_per_order(roi)

    if per_order > 0:
        status = CommissionStatus.CALCULATED
    else:
        status = CommissionStatus.NO_COMMISSION

    return CommissionRecord(
        operator=aggregate.operator,
        period_start=aggregate.period_start,
        period_end=aggregate.period_end,
        order_count=aggregate.total_orders,
        roi=roi,
        commission_per_order=per_order,
        total_commission=aggregate.total_orders * per_order,
        status=status,
    )
