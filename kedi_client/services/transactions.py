"""Recent-transactions feed for the daily activity graph"""

from datetime import date, timedelta
from typing import List

from kedi_client.domain.models import DailyCount
from kedi_client.domain.transactions import count_by_day
from kedi_client.infrastructure.clients.revenuecat import RevenueCatClient
from kedi_client.utils.date_utils import utc_today


async def fetch_daily_transaction_counts(
    client: RevenueCatClient,
    days: int = 7,
    limit: int = 100,
    today: date | None = None,
) -> List[DailyCount]:
    """
    Count the latest transactions per day over the last `days` days.

    Only the first page (`limit` transactions) is read; older days in a busy
    window may be undercounted.

    Raises:
        ApiError: From the transactions call
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    today = today or utc_today()
    response = await client.transactions(limit=limit)
    transactions = (response.transactions if response else None) or []

    return count_by_day(
        (txn.purchased_at for txn in transactions),
        start=today - timedelta(days=days - 1),
        end=today,
    )
