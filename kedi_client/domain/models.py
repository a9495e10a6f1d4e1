"""Domain models - pure Python dataclasses representing analytics values"""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class ChartSeriesPoint:
    """Single sample of a chart series"""

    date: datetime
    value: float


@dataclass(frozen=True)
class DailyCount:
    """Number of transactions that happened on one day"""

    date: date
    count: int
