"""
Leaderboard ranking by total commission.

Ranks are positional (1..N): equal commissions get consecutive ranks,
ordered by operator identifier so the result does not depend on the
order rows were fetched in.
"""

from typing import Iterable, List

from src.schemas.commission import CommissionRecord, RankedEntry, RankTier

RANK_TIERS = {
    1: RankTier(title="游艇会黑金卡", privilege="顶级会员待遇", emoji="🥇"),
    2: RankTier(title="阳光国会黑金卡", privilege="高级会员待遇", emoji="🥈"),
    3: RankTier(title="黑灯舞黑金卡", privilege="公司提供免费体检一次", emoji="🥉"),
}
DEFAULT_TIER = RankTier(title="努力拼搏", privilege="继续加油💪", emoji="💪")


def tier_for_rank(rank: int) -> RankTier:
    return RANK_TIERS.get(rank, DEFAULT_TIER)


def rank(records: Iterable[CommissionRecord]) -> List[RankedEntry]:
    """Sort by total commission (highest first) and attach rank and tier."""
    ordered = sorted(
        records,
        key=lambda r: (-r.total_commission, r.operator),
    )
    return [
        RankedEntry(
            **record.model_dump(),
            rank=position,
            tier=tier_for_rank(position),
        )
        for position, record in enumerate(ordered, start=1)
    ]
