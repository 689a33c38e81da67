"""Business logic services.

aggregator, commission, ranking and pipeline are pure functions over
canonical records; record_store and commission_cache do the database I/O.
"""

from src.services.aggregator import aggregate
from src.services.commission import compute_commission
from src.services.pipeline import build_leaderboard, compute_realtime, month_bounds
from src.services.ranking import rank

__all__ = [
    "aggregate",
    "compute_commission",
    "rank",
    "build_leaderboard",
    "compute_realtime",
    "month_bounds",
]
