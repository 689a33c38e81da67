"""
Tests for leaderboard ranking and tier assignment.
"""

from datetime import date
from decimal import Decimal

from src.models.commission import CommissionStatus
from src.schemas.commission import CommissionRecord
from src.services.ranking import DEFAULT_TIER, RANK_TIERS, rank, tier_for_rank


def _record(operator, total):
    return CommissionRecord(
        operator=operator,
        period_start=date(2025, 8, 1),
        period_end=date(2025, 8, 31),
        order_count=0,
        roi=Decimal("0"),
        commission_per_order=Decimal("0"),
        total_commission=Decimal(str(total)),
        status=CommissionStatus.CALCULATED,
    )


class TestRank:
    def test_sorted_by_commission_descending(self):
        ranked = rank([_record("乔", 20), _record("白", 70), _record("妹", 35)])

        assert [r.operator for r in ranked] == ["白", "妹", "乔"]
        assert [r.rank for r in ranked] == [1, 2, 3]

    def test_ranks_are_contiguous(self):
        records = [_record(f"op{i}", i * 3 % 7) for i in range(6)]
        ranked = rank(records)

        assert [r.rank for r in ranked] == list(range(1, 7))
        totals = [r.total_commission for r in ranked]
        assert totals == sorted(totals, reverse=True)

    def test_ties_broken_by_operator(self):
        ranked_a = rank([_record("b", 50), _record("a", 50), _record("c", 10)])
        ranked_b = rank([_record("c", 10), _record("a", 50), _record("b", 50)])

        assert [r.operator for r in ranked_a] == ["a", "b", "c"]
        assert [r.operator for r in ranked_a] == [r.operator for r in ranked_b]

    def test_all_zero_still_ranked(self):
        ranked = rank([_record("x", 0), _record("y", 0)])
        assert [r.rank for r in ranked] == [1, 2]

    def test_empty(self):
        assert rank([]) == []

    def test_record_fields_preserved(self):
        ranked = rank([_record("乔", "70.00")])
        assert ranked[0].total_commission == Decimal("70")
        assert ranked[0].status == CommissionStatus.CALCULATED


class TestTiers:
    def test_podium_titles(self):
        ranked = rank([_record(op, 100 - i) for i, op in enumerate("abcde")])

        assert ranked[0].tier_title == "游艇会黑金卡"
        assert ranked[1].tier_title == "阳光国会黑金卡"
        assert ranked[2].tier_title == "黑灯舞黑金卡"
        assert ranked[3].tier == DEFAULT_TIER
        assert ranked[4].tier == DEFAULT_TIER

    def test_tier_title_serialized(self):
        ranked = rank([_record("乔", 70)])
        dumped = ranked[0].model_dump(mode="json")

        assert dumped["tier_title"] == "游艇会黑金卡"
        assert dumped["tier"]["title"] == "游艇会黑金卡"

    def test_tier_for_rank(self):
        assert tier_for_rank(1) == RANK_TIERS[1]
        assert tier_for_rank(3).privilege == "公司提供免费体检一次"
        assert tier_for_rank(42).title == "努力拼搏"
