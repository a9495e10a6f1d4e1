"""Endpoint catalog - every RevenueCat operation as a value

Each remote operation is a frozen dataclass carrying only what its request
needs. `resolve()` turns a variant into the concrete method, URL, parameters
and headers. Resolution is a pure function of the variant, the bearer token
and the configured API roots.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from kedi_client.config import Settings, settings as default_settings
from kedi_client.utils.date_utils import format_api_date

REQUESTED_WITH_HEADER = ("X-Requested-With", "XMLHttpRequest")
JSON_CONTENT_TYPE = "application/json"


class ApiBase(str, Enum):
    PUBLIC = "public"
    INTERNAL = "internal"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ParameterEncoding(str, Enum):
    QUERY = "query"
    JSON = "json"


class ChartName(str, Enum):
    """Chart identifiers accepted by `me/charts_v2/{name}`"""

    ACTIVES = "actives"
    ACTIVES_MOVEMENT = "actives_movement"
    ARR = "arr"
    CHURN = "churn"
    CUSTOMERS_ACTIVE = "customers_active"
    CUSTOMERS_NEW = "customers_new"
    MRR = "mrr"
    MRR_MOVEMENT = "mrr_movement"
    REFUND_RATE = "refund_rate"
    REVENUE = "revenue"
    TRIALS = "trials"
    TRIALS_MOVEMENT = "trials_movement"
    TRIAL_CONVERSION_RATE = "trial_conversion_rate"


class ChartResolution(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def _compact(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


# Request payloads


@dataclass(frozen=True)
class LoginRequest:
    email: str
    password: str
    otp_code: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        return _compact({"email": self.email, "password": self.password, "otp_code": self.otp_code})


@dataclass(frozen=True)
class ChartRequest:
    """Chart query; `name` is a path component, the rest is sent as query"""

    name: ChartName
    resolution: ChartResolution
    start_date: date
    end_date: date

    def to_params(self) -> Dict[str, Any]:
        return {
            "resolution": ChartResolution(self.resolution).value,
            "start_date": format_api_date(self.start_date),
            "end_date": format_api_date(self.end_date),
        }


@dataclass(frozen=True)
class TransactionsRequest:
    limit: Optional[int] = 50
    start_from: Optional[str] = None  # pagination cursor from a previous page

    def to_params(self) -> Dict[str, Any]:
        return _compact({"limit": self.limit, "start_from": self.start_from})


@dataclass(frozen=True)
class CreateWebhookRequest:
    name: str
    url: str
    authorization_header: Optional[str] = None
    environment: Optional[str] = None  # "production" | "sandbox"; None sends both
    app_id: Optional[str] = None
    event_types: Optional[Tuple[str, ...]] = None

    def to_params(self) -> Dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "url": self.url,
                "authorization_header": self.authorization_header,
                "environment": self.environment,
                "app_id": self.app_id,
                "event_types": list(self.event_types) if self.event_types is not None else None,
            }
        )


@dataclass(frozen=True)
class UpdateWebhookRequest:
    name: Optional[str] = None
    url: Optional[str] = None
    authorization_header: Optional[str] = None
    environment: Optional[str] = None
    app_id: Optional[str] = None
    event_types: Optional[Tuple[str, ...]] = None

    def to_params(self) -> Dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "url": self.url,
                "authorization_header": self.authorization_header,
                "environment": self.environment,
                "app_id": self.app_id,
                "event_types": list(self.event_types) if self.event_types is not None else None,
            }
        )


# Endpoint variants


@dataclass(frozen=True)
class Login:
    name: ClassVar[str] = "login"
    request: LoginRequest

    @property
    def path(self) -> str:
        return "login"


@dataclass(frozen=True)
class Logout:
    name: ClassVar[str] = "logout"

    @property
    def path(self) -> str:
        return "logout"


@dataclass(frozen=True)
class Me:
    name: ClassVar[str] = "me"

    @property
    def path(self) -> str:
        return "me"


@dataclass(frozen=True)
class Projects:
    name: ClassVar[str] = "projects"

    @property
    def path(self) -> str:
        return "me/projects"


@dataclass(frozen=True)
class ProjectDetail:
    name: ClassVar[str] = "project_detail"
    id: str

    @property
    def path(self) -> str:
        return f"me/projects/{self.id}"


@dataclass(frozen=True)
class Overview:
    name: ClassVar[str] = "overview"

    @property
    def path(self) -> str:
        return "me/overview"


@dataclass(frozen=True)
class Charts:
    name: ClassVar[str] = "charts"
    request: ChartRequest

    @property
    def path(self) -> str:
        return f"me/charts_v2/{ChartName(self.request.name).value}"


@dataclass(frozen=True)
class Transactions:
    name: ClassVar[str] = "transactions"
    request: TransactionsRequest = field(default_factory=TransactionsRequest)

    @property
    def path(self) -> str:
        return "me/transactions"


@dataclass(frozen=True)
class TransactionDetail:
    name: ClassVar[str] = "transaction_detail"
    project_id: str
    subscriber_id: str

    @property
    def path(self) -> str:
        return f"me/apps/{self.project_id}/subscribers/{self.subscriber_id}"


@dataclass(frozen=True)
class TransactionDetailActivity:
    name: ClassVar[str] = "transaction_detail_activity"
    project_id: str
    subscriber_id: str

    @property
    def path(self) -> str:
        return f"me/apps/{self.project_id}/subscribers/{self.subscriber_id}/activity"


@dataclass(frozen=True)
class Webhooks:
    name: ClassVar[str] = "webhooks"
    project_id: str

    @property
    def path(self) -> str:
        return f"me/projects/{self.project_id}/integrations/webhooks"


@dataclass(frozen=True)
class CreateWebhook:
    name: ClassVar[str] = "create_webhook"
    project_id: str
    request: CreateWebhookRequest

    @property
    def path(self) -> str:
        return f"me/projects/{self.project_id}/integrations/webhooks"


@dataclass(frozen=True)
class UpdateWebhook:
    name: ClassVar[str] = "update_webhook"
    project_id: str
    webhook_id: str
    request: UpdateWebhookRequest

    @property
    def path(self) -> str:
        return f"me/projects/{self.project_id}/integrations/webhooks/{self.webhook_id}"


@dataclass(frozen=True)
class DeleteWebhook:
    name: ClassVar[str] = "delete_webhook"
    project_id: str
    webhook_id: str

    @property
    def path(self) -> str:
        return f"me/projects/{self.project_id}/integrations/webhooks/{self.webhook_id}"


@dataclass(frozen=True)
class TestWebhook:
    __test__ = False  # not a pytest test class

    name: ClassVar[str] = "test_webhook"
    project_id: str
    webhook_id: str

    @property
    def path(self) -> str:
        return f"me/projects/{self.project_id}/integrations/webhooks/{self.webhook_id}/test_webhook"


Endpoint = Union[
    Login,
    Logout,
    Me,
    Projects,
    ProjectDetail,
    Overview,
    Charts,
    Transactions,
    TransactionDetail,
    TransactionDetailActivity,
    Webhooks,
    CreateWebhook,
    UpdateWebhook,
    DeleteWebhook,
    TestWebhook,
]

ENDPOINT_TYPES: Tuple[type, ...] = Endpoint.__args__

_INTERNAL = (
    Projects,
    ProjectDetail,
    TransactionDetailActivity,
    Webhooks,
    CreateWebhook,
    UpdateWebhook,
    DeleteWebhook,
    TestWebhook,
)
_POST = (Login, Logout, CreateWebhook, TestWebhook)
_SANDBOX_MODE_OFF = (Overview, TransactionDetail, TransactionDetailActivity)
_WITH_PAYLOAD = (Login, Charts, Transactions, CreateWebhook, UpdateWebhook)
_JSON_BODY = (Login, CreateWebhook, UpdateWebhook)
# No body, but the API still expects a JSON content type
_EXPLICIT_CONTENT_TYPE = (Logout, DeleteWebhook, TestWebhook)


def base_of(endpoint: Endpoint) -> ApiBase:
    return ApiBase.INTERNAL if isinstance(endpoint, _INTERNAL) else ApiBase.PUBLIC


def method_of(endpoint: Endpoint) -> HttpMethod:
    if isinstance(endpoint, _POST):
        return HttpMethod.POST
    if isinstance(endpoint, UpdateWebhook):
        return HttpMethod.PUT
    if isinstance(endpoint, DeleteWebhook):
        return HttpMethod.DELETE
    return HttpMethod.GET


def parameters_of(endpoint: Endpoint) -> Optional[Dict[str, Any]]:
    if isinstance(endpoint, _SANDBOX_MODE_OFF):
        return {"sandbox_mode": False}
    if isinstance(endpoint, _WITH_PAYLOAD):
        return endpoint.request.to_params()
    return None


def encoding_of(endpoint: Endpoint) -> ParameterEncoding:
    return ParameterEncoding.JSON if isinstance(endpoint, _JSON_BODY) else ParameterEncoding.QUERY


def headers_of(endpoint: Endpoint, token: Optional[str] = None) -> Dict[str, str]:
    name, value = REQUESTED_WITH_HEADER
    headers = {name: value}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if isinstance(endpoint, _EXPLICIT_CONTENT_TYPE):
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


@dataclass(frozen=True)
class ResolvedRequest:
    """Everything needed to put one endpoint call on the wire"""

    endpoint_name: str
    base: ApiBase
    method: HttpMethod
    path: str
    url: str
    encoding: ParameterEncoding
    parameters: Optional[Dict[str, Any]]
    headers: Dict[str, str]

    @property
    def query(self) -> Optional[Dict[str, Any]]:
        return self.parameters if self.encoding is ParameterEncoding.QUERY else None

    @property
    def body(self) -> Optional[Dict[str, Any]]:
        return self.parameters if self.encoding is ParameterEncoding.JSON else None


def resolve(endpoint: Endpoint, token: Optional[str] = None, config: Optional[Settings] = None) -> ResolvedRequest:
    """
    Resolve an endpoint variant into a wire request.

    Raises:
        TypeError: If `endpoint` is not one of the catalog variants
    """
    if not isinstance(endpoint, ENDPOINT_TYPES):
        raise TypeError(f"Not a RevenueCat endpoint: {endpoint!r}")

    config = config or default_settings
    base = base_of(endpoint)
    root = config.internal_api_base if base is ApiBase.INTERNAL else config.public_api_base

    return ResolvedRequest(
        endpoint_name=endpoint.name,
        base=base,
        method=method_of(endpoint),
        path=endpoint.path,
        url=f"{root}/{endpoint.path}",
        encoding=encoding_of(endpoint),
        parameters=parameters_of(endpoint),
        headers=headers_of(endpoint, token),
    )
