"""
Tests for the tiered ROI commission rules.
"""

from datetime import date
from decimal import Decimal

import pytest

from src.models.commission import CommissionStatus
from src.schemas.commission import OperatorAggregate
from src.services.commission import (
    calculate_roi,
    commission_per_order,
    compute_commission,
    status_text,
)


def _aggregate(spend, revenue, orders, operator="乔"):
    return OperatorAggregate(
        operator=operator,
        period_start=date(2025, 8, 1),
        period_end=date(2025, 8, 31),
        total_spend=Decimal(str(spend)),
        total_revenue_converted=Decimal(str(revenue)),
        total_orders=orders,
    )


class TestPerOrderRate:
    @pytest.mark.parametrize(
        "roi,expected",
        [
            ("2.5", "7"),
            ("1.0", "7"),
            ("0.99999999", "7"),
            ("0.99994", "5"),
            ("0.8", "5"),
            ("0.79995", "5"),
            ("0.79994", "0"),
            ("0.5", "0"),
            ("0", "0"),
        ],
    )
    def test_tier_boundaries(self, roi, expected):
        assert commission_per_order(Decimal(roi)) == Decimal(expected)

    def test_status_text_per_tier(self):
        assert status_text(Decimal("1.2")) == "高效投放"
        assert status_text(Decimal("0.85")) == "合格投放"
        assert status_text(Decimal("0.1")) == "跑了个锤子"


class TestRoi:
    def test_revenue_over_spend(self):
        assert calculate_roi(Decimal("150"), Decimal("100")) == Decimal("1.5")

    def test_zero_spend_is_zero_roi(self):
        assert calculate_roi(Decimal("500"), Decimal("0")) == Decimal("0")


class TestComputeCommission:
    def test_high_tier_total(self):
        record = compute_commission(_aggregate(100, 100, 10))

        assert record.roi == Decimal("1")
        assert record.commission_per_order == Decimal("7")
        assert record.total_commission == Decimal("70")
        assert record.status == CommissionStatus.CALCULATED

    def test_base_tier_total(self):
        record = compute_commission(_aggregate(100, 85, 4))

        assert record.commission_per_order == Decimal("5")
        assert record.total_commission == Decimal("20")
        assert record.status == CommissionStatus.CALCULATED

    def test_below_threshold_earns_nothing(self):
        record = compute_commission(_aggregate(100, 50, 30))

        assert record.commission_per_order == Decimal("0")
        assert record.total_commission == Decimal("0")
        assert record.status == CommissionStatus.NO_COMMISSION

    def test_zero_spend_earns_nothing(self):
        record = compute_commission(_aggregate(0, 40, 12))

        assert record.roi == Decimal("0")
        assert record.total_commission == Decimal("0")
        assert record.status == CommissionStatus.NO_COMMISSION

    def test_total_is_orders_times_rate(self):
        for orders in (0, 1, 13, 250):
            record = compute_commission(_aggregate(100, 120, orders))
            assert record.total_commission == orders * record.commission_per_order

    def test_roi_is_not_rounded_on_the_record(self):
        record = compute_commission(_aggregate(3, 1, 1))
        assert record.roi == Decimal("1") / Decimal("3")

    def test_period_and_operator_carried_over(self):
        record = compute_commission(_aggregate(100, 100, 1, operator="白"))

        assert record.operator == "白"
        assert record.period_start == date(2025, 8, 1)
        assert record.period_end == date(2025, 8, 31)
        assert record.order_count == 1

    def test_deterministic(self):
        agg = _aggregate("123.45", "117.30", 9)
        assert compute_commission(agg) == compute_commission(agg)
