"""Business-calendar helpers."""

import datetime
from zoneinfo import ZoneInfo

from src.config import settings


def business_today() -> datetime.date:
    """Today's date in the team's timezone."""
    return datetime.datetime.now(ZoneInfo(settings.timezone)).date()
