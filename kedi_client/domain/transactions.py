"""Daily transaction counts for the recent-activity graph"""

from collections import Counter
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from kedi_client.domain.models import DailyCount
from kedi_client.utils.date_utils import generate_date_range


def count_by_day(timestamps: Iterable[Optional[datetime]], start: date, end: date) -> List[DailyCount]:
    """
    Count transactions per UTC day over [start, end].

    Every day in the window appears, zero-filled. Missing timestamps and
    timestamps outside the window are ignored.
    """
    counts: Counter = Counter()
    for timestamp in timestamps:
        if timestamp is None:
            continue
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(timezone.utc)
        day = timestamp.date()
        if start <= day <= end:
            counts[day] += 1

    return [DailyCount(date=day, count=counts[day]) for day in generate_date_range(start, end)]
