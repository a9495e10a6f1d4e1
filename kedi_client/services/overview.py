"""Overview aggregate: one summary call plus one chart call per metric card"""

import logging
from datetime import date
from typing import Iterable, Optional

from kedi_client.domain.overview import (
    DEFAULT_CONFIGS,
    PROCEEDS_KEY,
    TOTAL_REVENUE_KEY,
    OverviewItem,
    OverviewItemConfig,
    OverviewResult,
    OverviewState,
    apply_chart,
    apply_summary,
    placeholder_items,
)
from kedi_client.infrastructure.clients.revenuecat import RevenueCatClient
from kedi_client.infrastructure.clients.schemas import ChartResponse
from kedi_client.infrastructure.observability.metrics import overview_section_failures_counter
from kedi_client.utils.date_utils import utc_today
from kedi_client.utils.gather import Outcome, gather_mapping, gather_outcomes


async def fetch_chart(client: RevenueCatClient, config: OverviewItemConfig, today: date) -> Optional[ChartResponse]:
    """Fetch the chart feeding one card over its configured period"""
    source = config.type.chart
    start_date, end_date = config.time_period.date_range(today)
    return await client.chart(source.name, config.time_period.resolution, start_date, end_date)


async def fetch_overview(
    client: RevenueCatClient,
    configs: Iterable[OverviewItemConfig] = DEFAULT_CONFIGS,
    today: date | None = None,
) -> OverviewResult:
    """
    Fetch the overview summary and every card's chart concurrently.

    Flow:
    1. Start the summary call and one chart call per card that has a chart
    2. Wait for all of them; a failing call never cancels its siblings
    3. Summary failure marks the whole result FAILED
    4. Chart failures are logged and kept on their own card
    """
    configs = list(configs)
    today = today or utc_today()
    items = placeholder_items(configs)

    chart_calls = {
        config: fetch_chart(client, config, today)
        for config in configs
        if config.type.chart is not None
    }
    summary_outcome, chart_outcomes = await _gather(client, chart_calls)

    result = OverviewResult(state=OverviewState.DATA, items=items)

    if summary_outcome.ok:
        summary = summary_outcome.value
        apply_summary(
            items,
            mrr=summary.mrr if summary else None,
            active_subscribers=summary.active_subscribers_count if summary else None,
            active_trials=summary.active_trials_count if summary else None,
            revenue=summary.revenue if summary else None,
            active_users=summary.active_users_count if summary else None,
            installs=summary.installs_count if summary else None,
        )
    else:
        overview_section_failures_counter.labels(section="summary").inc()
        logging.error(
            f"Overview summary failed: {summary_outcome.error}",
            extra={"step": "overview_summary", "error_kind": summary_outcome.error.kind},
        )
        result.state = OverviewState.FAILED
        result.error = summary_outcome.error

    for config, outcome in chart_outcomes.items():
        _apply_chart_outcome(items[config], outcome)

    return result


async def _gather(client: RevenueCatClient, chart_calls):
    # summary first, then charts in key order
    summary_call = client.overview()
    keys = list(chart_calls)
    summary_outcome, *outcomes = await gather_outcomes(summary_call, *(chart_calls[key] for key in keys))
    return summary_outcome, dict(zip(keys, outcomes))


def _apply_chart_outcome(item: OverviewItem, outcome: Outcome[Optional[ChartResponse]]) -> None:
    config = item.config
    if not outcome.ok:
        overview_section_failures_counter.labels(section=config.type.chart.name.value).inc()
        logging.warning(
            f"Chart fetch failed: {outcome.error}",
            extra={
                "step": "overview_chart",
                "metric": config.type.value,
                "period": config.time_period.value,
                "error_kind": outcome.error.kind,
            },
        )
        item.error = outcome.error
        return

    chart = outcome.value or ChartResponse()
    apply_chart(
        item,
        chart.series(config.type.chart.index),
        total_revenue=chart.summary_value(TOTAL_REVENUE_KEY),
        proceeds=chart.summary_value(PROCEEDS_KEY),
    )


async def refresh_charts(
    client: RevenueCatClient,
    result: OverviewResult,
    configs: Iterable[OverviewItemConfig],
    today: date | None = None,
) -> OverviewResult:
    """Fetch charts for newly added cards into an existing result"""
    today = today or utc_today()
    calls = {}
    for config in configs:
        if config not in result.items:
            result.items[config] = OverviewItem(config=config)
        if config.type.chart is not None:
            calls[config] = fetch_chart(client, config, today)

    for config, outcome in (await gather_mapping(calls)).items():
        _apply_chart_outcome(result.items[config], outcome)
    return result
