"""Pydantic response models for RevenueCat API payloads

Wire payloads are loosely structured: any scalar may be missing, chart rows
vary in width, and several responses nest the interesting fields inside
`body` / `subscriber` wrappers. The models below absorb those quirks so
callers only see flat, typed values.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, RootModel, field_validator, model_validator

from kedi_client.domain.models import ChartSeriesPoint
from kedi_client.utils.date_utils import from_timestamp, from_timestamp_ms


class ResponseModel(BaseModel):
    """Base for every decoded payload; unknown keys are ignored"""

    model_config = ConfigDict(extra="ignore")


class ErrorResponse(ResponseModel):
    """Standard RevenueCat error envelope"""

    code: Optional[int] = None
    message: Optional[str] = None
    type: Optional[str] = None
    doc_url: Optional[str] = None


# Auth


class LoginResponse(ResponseModel):
    authentication_token: str
    authentication_token_expiration: Optional[datetime] = None


class MeResponse(ResponseModel):
    distinct_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    current_plan: Optional[str] = None
    created_at: Optional[datetime] = None
    first_transaction_at: Optional[datetime] = None


# Projects


class App(ResponseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    bundle_id: Optional[str] = None


class Project(ResponseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    apps: Optional[List[App]] = None


class ProjectsResponse(RootModel[List[Project]]):
    pass


# Overview & charts


class OverviewResponse(ResponseModel):
    active_subscribers_count: Optional[int] = None
    active_trials_count: Optional[int] = None
    active_users_count: Optional[int] = None
    installs_count: Optional[int] = None
    mrr: Optional[float] = None
    revenue: Optional[float] = None


class ChartResponse(ResponseModel):
    """
    Chart payload from `me/charts_v2/{name}`.

    `values` rows are positional: index 0 is a unix timestamp in seconds, the
    remaining columns depend on the chart. `summary` is keyed by section
    ("total", "average", ...) and then by display label ("Total Revenue").
    """

    display_name: Optional[str] = None
    resolution: Optional[str] = None
    values: Optional[List[List[Optional[float]]]] = None
    summary: Optional[Dict[str, Optional[Dict[str, Optional[float]]]]] = None

    @field_validator("values")
    @classmethod
    def _check_timestamps(cls, values: Optional[List[List[Optional[float]]]]) -> Optional[List[List[Optional[float]]]]:
        for row in values or []:
            timestamp = _cell(row, 0)
            try:
                from_timestamp(timestamp)
            except (ValueError, OverflowError, OSError) as e:
                raise ValueError(f"Chart timestamp {timestamp} is out of range") from e
        return values

    def series(self, index: int) -> List[ChartSeriesPoint]:
        """Map rows to points, reading the value at `index` (0 when the row is shorter)"""
        return [
            ChartSeriesPoint(
                date=from_timestamp(_cell(row, 0)),
                value=_cell(row, index),
            )
            for row in self.values or []
        ]

    def summary_value(self, key: str, section: str = "total", default: float = 0) -> float:
        """Literal lookup of `summary[section][key]`, `default` when any level is absent"""
        value = ((self.summary or {}).get(section) or {}).get(key)
        return default if value is None else value


def _cell(row: List[Optional[float]], index: int) -> float:
    if index < 0 or index >= len(row) or row[index] is None:
        return 0
    return row[index]


# Transactions


class Transaction(ResponseModel):
    store_transaction_identifier: Optional[str] = None
    subscriber_id: Optional[str] = None
    product_identifier: Optional[str] = None
    store: Optional[str] = None
    revenue: Optional[float] = None
    purchased_at: Optional[datetime] = None
    expires_date: Optional[datetime] = None
    is_trial_period: Optional[bool] = None
    is_trial_conversion: Optional[bool] = None
    is_renewal: Optional[bool] = None
    is_sandbox: Optional[bool] = None
    was_refunded: Optional[bool] = None
    country_code: Optional[str] = None
    app: Optional[App] = None


class TransactionsResponse(ResponseModel):
    transactions: Optional[List[Transaction]] = None
    first_page: Optional[str] = None
    next_page: Optional[str] = None


class TransactionDetailResponse(ResponseModel):
    """Subscriber detail, flattened out of the `subscriber` wrapper"""

    app_user_id: Optional[str] = None
    original_app_user_id: Optional[str] = None
    aliases: Optional[List[str]] = None
    country_code: Optional[str] = None
    first_seen_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None
    dollars_spent: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_subscriber(cls, data: Any) -> Any:
        if isinstance(data, dict) and "subscriber" in data:
            subscriber = data["subscriber"]
            return subscriber if isinstance(subscriber, dict) else {}
        return data


class TransactionActivityEvent(ResponseModel):
    """
    One subscriber event. On the wire the discriminator sits at the top level
    while every other attribute lives in a nested `body` object:

        {"type": "INITIAL_PURCHASE", "body": {"price": 9.99, ...}}

    `type` is required; everything else may be absent.
    """

    type: str
    price: Optional[float] = None
    currency: Optional[str] = None
    price_in_purchased_currency: Optional[float] = None
    event_timestamp_ms: Optional[int] = None
    purchased_at_ms: Optional[int] = None
    expiration_at_ms: Optional[int] = None
    product_id: Optional[str] = None
    new_product_id: Optional[str] = None
    offer_code: Optional[str] = None
    cancel_reason: Optional[str] = None
    period_type: Optional[str] = None
    is_trial_conversion: Optional[bool] = None
    transferred_from: Optional[List[str]] = None
    transferred_to: Optional[List[str]] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_body(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        body = data.get("body")
        flat = dict(body) if isinstance(body, dict) else {}
        flat.pop("type", None)
        if "type" in data:
            flat["type"] = data["type"]
        return flat

    @property
    def event_at(self) -> Optional[datetime]:
        return from_timestamp_ms(self.event_timestamp_ms)

    @property
    def purchased_at(self) -> Optional[datetime]:
        return from_timestamp_ms(self.purchased_at_ms)

    @property
    def expires_at(self) -> Optional[datetime]:
        return from_timestamp_ms(self.expiration_at_ms)


class TransactionActivityResponse(ResponseModel):
    """Activity feed; `subscriber.app_user_id` is lifted to the top level"""

    events: Optional[List[TransactionActivityEvent]] = None
    app_user_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_subscriber(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        subscriber = data.get("subscriber")
        flat = {"events": data.get("events")}
        if isinstance(subscriber, dict):
            flat["app_user_id"] = subscriber.get("app_user_id")
        return flat


# Webhooks


class Webhook(ResponseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    environment: Optional[str] = None
    app_id: Optional[str] = None
    event_types: Optional[List[str]] = None
    authorization_header: Optional[str] = None
    created_at: Optional[datetime] = None


class WebhooksResponse(RootModel[List[Webhook]]):
    pass
