"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def format_api_date(value: date) -> str:
    """Dates are sent to RevenueCat as YYYY-MM-DD"""
    return value.strftime("%Y-%m-%d")


def from_timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def from_timestamp_ms(milliseconds: Optional[int]) -> Optional[datetime]:
    if milliseconds is None:
        return None
    return from_timestamp(milliseconds / 1000)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()
