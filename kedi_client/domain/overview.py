"""Overview metric catalog - which chart feeds which card and how"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from kedi_client.domain.endpoints import ChartName, ChartResolution
from kedi_client.domain.exceptions import ApiError
from kedi_client.domain.models import ChartSeriesPoint

ALL_TIME_START = date(2018, 1, 1)

TOTAL_REVENUE_KEY = "Total Revenue"
PROCEEDS_KEY = "Proceeds"


@dataclass(frozen=True)
class ChartSource:
    """Chart feeding a metric, and the row column holding its value"""

    name: ChartName
    index: int


class OverviewItemType(str, Enum):
    MRR = "mrr"
    SUBSCRIPTIONS = "subscriptions"
    TRIALS = "trials"
    REVENUE = "revenue"
    USERS = "users"
    INSTALLS = "installs"
    ARR = "arr"
    PROCEEDS = "proceeds"
    NEW_USERS = "new_users"
    CHURN_RATE = "churn_rate"
    SUBSCRIPTIONS_LOST = "subscriptions_lost"

    @property
    def chart(self) -> Optional[ChartSource]:
        return _CHART_SOURCES.get(self)


_CHART_SOURCES: Dict[OverviewItemType, ChartSource] = {
    OverviewItemType.MRR: ChartSource(ChartName.MRR, 1),
    OverviewItemType.SUBSCRIPTIONS: ChartSource(ChartName.ACTIVES, 1),
    OverviewItemType.TRIALS: ChartSource(ChartName.TRIALS, 1),
    OverviewItemType.REVENUE: ChartSource(ChartName.REVENUE, 1),
    OverviewItemType.USERS: ChartSource(ChartName.CUSTOMERS_ACTIVE, 1),
    OverviewItemType.ARR: ChartSource(ChartName.ARR, 1),
    OverviewItemType.PROCEEDS: ChartSource(ChartName.REVENUE, 2),
    OverviewItemType.NEW_USERS: ChartSource(ChartName.CUSTOMERS_NEW, 1),
    OverviewItemType.CHURN_RATE: ChartSource(ChartName.CHURN, 3),
    OverviewItemType.SUBSCRIPTIONS_LOST: ChartSource(ChartName.ACTIVES_MOVEMENT, 2),
}


class TimePeriod(str, Enum):
    LAST_7_DAYS = "last_7_days"
    LAST_28_DAYS = "last_28_days"
    LAST_90_DAYS = "last_90_days"
    LAST_12_MONTHS = "last_12_months"
    ALL_TIME = "all_time"

    @property
    def resolution(self) -> ChartResolution:
        if self in (TimePeriod.LAST_12_MONTHS, TimePeriod.ALL_TIME):
            return ChartResolution.MONTH
        return ChartResolution.DAY

    def date_range(self, today: date) -> Tuple[date, date]:
        """Inclusive (start_date, end_date) ending on `today`"""
        if self is TimePeriod.LAST_7_DAYS:
            return today - timedelta(days=6), today
        if self is TimePeriod.LAST_28_DAYS:
            return today - timedelta(days=27), today
        if self is TimePeriod.LAST_90_DAYS:
            return today - timedelta(days=89), today
        if self is TimePeriod.LAST_12_MONTHS:
            return _months_back(today.replace(day=1), 11), today
        return ALL_TIME_START, today


def _months_back(first_of_month: date, months: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) - months
    return date(index // 12, index % 12 + 1, 1)


@dataclass(frozen=True)
class OverviewItemConfig:
    """One metric card the user has configured"""

    type: OverviewItemType
    time_period: TimePeriod = TimePeriod.LAST_28_DAYS


DEFAULT_CONFIGS: Tuple[OverviewItemConfig, ...] = (
    OverviewItemConfig(OverviewItemType.MRR),
    OverviewItemConfig(OverviewItemType.SUBSCRIPTIONS),
    OverviewItemConfig(OverviewItemType.TRIALS),
    OverviewItemConfig(OverviewItemType.REVENUE, TimePeriod.LAST_28_DAYS),
    OverviewItemConfig(OverviewItemType.USERS, TimePeriod.LAST_28_DAYS),
    OverviewItemConfig(OverviewItemType.INSTALLS, TimePeriod.LAST_28_DAYS),
)


class OverviewState(str, Enum):
    DATA = "data"
    FAILED = "failed"


@dataclass
class OverviewItem:
    """
    Headline value and chart series of one card.

    Starts as a placeholder (no value, no chart). `error` holds the failure of
    this card's chart sub-call; other cards are unaffected by it.
    """

    config: OverviewItemConfig
    value: Optional[float] = None
    chart_values: Optional[List[ChartSeriesPoint]] = None
    error: Optional[ApiError] = None

    @property
    def is_placeholder(self) -> bool:
        return self.value is None and self.chart_values is None

    def set(self, value: Optional[float] = None, chart_values: Optional[List[ChartSeriesPoint]] = None) -> None:
        if value is not None:
            self.value = value
        if chart_values is not None:
            self.chart_values = chart_values


@dataclass
class OverviewResult:
    """
    Outcome of an overview fetch.

    FAILED only when the foundational overview summary call failed; chart
    failures stay on their own item.
    """

    state: OverviewState
    items: Dict[OverviewItemConfig, OverviewItem] = field(default_factory=dict)
    error: Optional[ApiError] = None

    def ordered(self, configs: Iterable[OverviewItemConfig]) -> List[OverviewItem]:
        return [self.items[config] for config in configs if config in self.items]


def placeholder_items(configs: Iterable[OverviewItemConfig]) -> Dict[OverviewItemConfig, OverviewItem]:
    return {config: OverviewItem(config=config) for config in configs}


def apply_summary(
    items: Dict[OverviewItemConfig, OverviewItem],
    mrr: Optional[float],
    active_subscribers: Optional[int],
    active_trials: Optional[int],
    revenue: Optional[float],
    active_users: Optional[int],
    installs: Optional[int],
) -> None:
    """
    Fill cards from the overview summary.

    MRR, subscriptions and trials fill the first card of that type whatever its
    period; revenue, users and installs are 28-day figures and only fill the
    matching 28-day card. Missing figures count as 0.
    """
    _set_first_of_type(items, OverviewItemType.MRR, mrr or 0)
    _set_first_of_type(items, OverviewItemType.SUBSCRIPTIONS, active_subscribers or 0)
    _set_first_of_type(items, OverviewItemType.TRIALS, active_trials or 0)

    last_28 = TimePeriod.LAST_28_DAYS
    _set_exact(items, OverviewItemConfig(OverviewItemType.REVENUE, last_28), revenue or 0)
    _set_exact(items, OverviewItemConfig(OverviewItemType.USERS, last_28), active_users or 0)
    _set_exact(items, OverviewItemConfig(OverviewItemType.INSTALLS, last_28), installs or 0)


def _set_first_of_type(items: Dict[OverviewItemConfig, OverviewItem], item_type: OverviewItemType, value: float) -> None:
    for config, item in items.items():
        if config.type is item_type:
            item.set(value=value)
            return


def _set_exact(items: Dict[OverviewItemConfig, OverviewItem], config: OverviewItemConfig, value: float) -> None:
    if config in items:
        items[config].set(value=value)


def apply_chart(
    item: OverviewItem,
    chart_values: List[ChartSeriesPoint],
    total_revenue: float = 0,
    proceeds: float = 0,
) -> None:
    """
    Fill one card from its chart.

    Running-total metrics (MRR, subscriptions, ...) only take the series; their
    headline comes from the summary. Period metrics take their headline from
    the chart: the last sample, or a summary total for revenue and proceeds.
    """
    item_type = item.config.type
    last_value = chart_values[-1].value if chart_values else 0

    if item_type is OverviewItemType.REVENUE:
        if item.config.time_period is TimePeriod.LAST_28_DAYS:
            item.set(chart_values=chart_values)
        else:
            item.set(value=total_revenue, chart_values=chart_values)
    elif item_type is OverviewItemType.PROCEEDS:
        item.set(value=proceeds, chart_values=chart_values)
    elif item_type in (OverviewItemType.ARR, OverviewItemType.CHURN_RATE):
        item.set(value=last_value, chart_values=chart_values)
    elif item_type in (OverviewItemType.NEW_USERS, OverviewItemType.SUBSCRIPTIONS_LOST):
        item.set(value=int(last_value), chart_values=chart_values)
    else:
        item.set(chart_values=chart_values)
