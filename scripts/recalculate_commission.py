"""
Recompute stored commission records from ad data.

Usage:
    python scripts/recalculate_commission.py --date 2025-08-11
    python scripts/recalculate_commission.py --start 2025-08-01 --end 2025-08-31

Uses DATABASE_URL / FX_RATE from the environment (or .env).
"""

import asyncio
import os
import sys
from datetime import date

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config import settings
from src.db import get_db_context
from src.services.commission_cache import refresh_range


async def recalculate(start: date, end: date):
    print(f"Recomputing commission {start} .. {end} (fx_rate={settings.fx_rate})")

    async with get_db_context() as db:
        results = await refresh_range(db, start, end)

    total = 0
    for day, records in results.items():
        total += len(records)
        line = ", ".join(
            f"{r.operator}: {r.order_count} orders, ROI {r.roi:.4f}, {r.total_commission} RMB"
            for r in records
        )
        print(f"  {day}: {line or 'no data'}")

    print(f"\nDone: {total} records over {len(results)} days")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Recompute stored commission records")
    parser.add_argument("--date", type=date.fromisoformat, help="Single day (YYYY-MM-DD)")
    parser.add_argument("--start", type=date.fromisoformat, help="First day of a range")
    parser.add_argument("--end", type=date.fromisoformat, help="Last day of a range")

    args = parser.parse_args()

    if args.date:
        start = end = args.date
    elif args.start and args.end:
        start, end = args.start, args.end
    else:
        parser.error("give --date, or both --start and --end")

    asyncio.run(recalculate(start, end))
