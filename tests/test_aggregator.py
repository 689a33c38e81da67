"""
Tests for per-operator aggregation.

Covers:
- Sums of spend / orders / converted revenue
- Inclusive period bounds and absent operators
- Per-row FX conversion
- Input validation of DailyEntry
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.schemas.commission import DailyEntry
from src.services.aggregator import aggregate, to_rate
from src.services.exceptions import InvalidPeriodError, InvalidRateError

AUG_1 = date(2025, 8, 1)
AUG_31 = date(2025, 8, 31)


def _by_operator(aggregates):
    return {a.operator: a for a in aggregates}


# ── Sums ─────────────────────────────────────────────────


class TestAggregateSums:
    def test_orders_and_spend_are_summed(self, make_entry):
        entries = [
            make_entry(day=date(2025, 8, d), ad_spend=spend, orders=orders)
            for d, spend, orders in [(1, "10.50", 3), (2, "20.25", 4), (3, "0", 0)]
        ]
        result = aggregate(entries, AUG_1, AUG_31, 20)

        assert len(result) == 1
        assert result[0].total_orders == 7
        assert result[0].total_spend == Decimal("30.75")

    def test_grouped_per_operator(self, make_entry):
        entries = [
            make_entry("乔", ad_spend=100, orders=10),
            make_entry("白", ad_spend=50, orders=2),
            make_entry("乔", day=date(2025, 8, 2), ad_spend=100, orders=5),
        ]
        result = _by_operator(aggregate(entries, AUG_1, AUG_31, 20))

        assert set(result) == {"乔", "白"}
        assert result["乔"].total_orders == 15
        assert result["乔"].total_spend == Decimal("200")
        assert result["白"].total_orders == 2

    def test_period_is_carried_on_aggregate(self, make_entry):
        result = aggregate([make_entry()], AUG_1, AUG_31, 20)
        assert result[0].period_start == AUG_1
        assert result[0].period_end == AUG_31

    def test_empty_input(self):
        assert aggregate([], AUG_1, AUG_31, 20) == []


# ── Period filtering ─────────────────────────────────────


class TestPeriodFiltering:
    def test_bounds_are_inclusive(self, make_entry):
        entries = [
            make_entry(day=date(2025, 7, 31), orders=100),
            make_entry(day=AUG_1, orders=1),
            make_entry(day=AUG_31, orders=2),
            make_entry(day=date(2025, 9, 1), orders=100),
        ]
        result = aggregate(entries, AUG_1, AUG_31, 20)
        assert result[0].total_orders == 3

    def test_operator_without_entries_in_period_is_absent(self, make_entry):
        entries = [
            make_entry("乔", orders=1),
            make_entry("白", day=date(2025, 7, 1), orders=9),
        ]
        result = _by_operator(aggregate(entries, AUG_1, AUG_31, 20))
        assert "白" not in result

    def test_single_day_period(self, make_entry):
        entries = [make_entry(day=AUG_1, orders=1), make_entry(day=date(2025, 8, 2), orders=5)]
        result = aggregate(entries, AUG_1, AUG_1, 20)
        assert result[0].total_orders == 1

    def test_start_after_end_rejected(self):
        with pytest.raises(InvalidPeriodError):
            aggregate([], AUG_31, AUG_1, 20)


# ── FX conversion ────────────────────────────────────────


class TestConversion:
    def test_revenue_converted_to_usd(self, make_entry):
        result = aggregate([make_entry(credit_card_amount=2000)], AUG_1, AUG_31, 20)
        assert result[0].total_revenue_converted == Decimal("100")

    def test_constant_rate_matches_converting_the_total(self, make_entry):
        amounts = ["123.40", "0.60", "999.99", "1500"]
        entries = [
            make_entry(day=date(2025, 8, i + 1), credit_card_amount=a)
            for i, a in enumerate(amounts)
        ]
        result = aggregate(entries, AUG_1, AUG_31, 20)

        total_mxn = sum(Decimal(a) for a in amounts)
        assert result[0].total_revenue_converted == total_mxn / Decimal("20")

    def test_float_rate_accepted(self, make_entry):
        result = aggregate([make_entry(credit_card_amount=55)], AUG_1, AUG_31, 18.5)
        assert result[0].total_revenue_converted == Decimal("55") / Decimal("18.5")

    @pytest.mark.parametrize("rate", [0, -20, "0"])
    def test_non_positive_rate_rejected(self, rate):
        with pytest.raises(InvalidRateError):
            to_rate(rate)


# ── DailyEntry validation ────────────────────────────────


class TestDailyEntryValidation:
    def test_negative_spend_rejected(self):
        with pytest.raises(ValidationError):
            DailyEntry(
                date=AUG_1, operator="乔", ad_spend=-1, credit_card_amount=0, order_count=0
            )

    def test_negative_orders_rejected(self):
        with pytest.raises(ValidationError):
            DailyEntry(
                date=AUG_1, operator="乔", ad_spend=0, credit_card_amount=0, order_count=-1
            )

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError):
            DailyEntry(date=AUG_1, operator="乔", ad_spend=0, order_count=0)

    def test_amount_beyond_column_rejected(self, make_entry):
        with pytest.raises(ValidationError):
            make_entry(credit_card_amount="1E30")
        with pytest.raises(ValidationError):
            make_entry(ad_spend="12345678901.00")

    def test_sub_cent_amount_rejected(self, make_entry):
        with pytest.raises(ValidationError):
            make_entry(ad_spend="1.005")

    def test_date_string_parsed(self):
        entry = DailyEntry(
            date="2025-08-01", operator="乔", ad_spend="1.5", credit_card_amount=0, order_count=0
        )
        assert entry.date == AUG_1
        assert entry.ad_spend == Decimal("1.5")
