"""Unit tests for endpoint resolution"""

from datetime import date

import pytest

from kedi_client.config import Settings
from kedi_client.domain import endpoints as ep
from kedi_client.domain.endpoints import ApiBase, HttpMethod, ParameterEncoding, resolve

CHART_REQUEST = ep.ChartRequest(
    name=ep.ChartName.MRR,
    resolution=ep.ChartResolution.DAY,
    start_date=date(2024, 2, 1),
    end_date=date(2024, 2, 28),
)
LOGIN_REQUEST = ep.LoginRequest(email="dev@example.com", password="secret")
CREATE_REQUEST = ep.CreateWebhookRequest(name="Slack", url="https://hooks.example.com/rc")
UPDATE_REQUEST = ep.UpdateWebhookRequest(url="https://hooks.example.com/new")

# endpoint, base, method, encoding, path
CATALOG = [
    (ep.Login(LOGIN_REQUEST), ApiBase.PUBLIC, HttpMethod.POST, ParameterEncoding.JSON, "login"),
    (ep.Logout(), ApiBase.PUBLIC, HttpMethod.POST, ParameterEncoding.QUERY, "logout"),
    (ep.Me(), ApiBase.PUBLIC, HttpMethod.GET, ParameterEncoding.QUERY, "me"),
    (ep.Projects(), ApiBase.INTERNAL, HttpMethod.GET, ParameterEncoding.QUERY, "me/projects"),
    (ep.ProjectDetail("p1"), ApiBase.INTERNAL, HttpMethod.GET, ParameterEncoding.QUERY, "me/projects/p1"),
    (ep.Overview(), ApiBase.PUBLIC, HttpMethod.GET, ParameterEncoding.QUERY, "me/overview"),
    (ep.Charts(CHART_REQUEST), ApiBase.PUBLIC, HttpMethod.GET, ParameterEncoding.QUERY, "me/charts_v2/mrr"),
    (ep.Transactions(), ApiBase.PUBLIC, HttpMethod.GET, ParameterEncoding.QUERY, "me/transactions"),
    (
        ep.TransactionDetail("p1", "s1"),
        ApiBase.PUBLIC,
        HttpMethod.GET,
        ParameterEncoding.QUERY,
        "me/apps/p1/subscribers/s1",
    ),
    (
        ep.TransactionDetailActivity("p1", "s1"),
        ApiBase.INTERNAL,
        HttpMethod.GET,
        ParameterEncoding.QUERY,
        "me/apps/p1/subscribers/s1/activity",
    ),
    (ep.Webhooks("p1"), ApiBase.INTERNAL, HttpMethod.GET, ParameterEncoding.QUERY, "me/projects/p1/integrations/webhooks"),
    (
        ep.CreateWebhook("p1", CREATE_REQUEST),
        ApiBase.INTERNAL,
        HttpMethod.POST,
        ParameterEncoding.JSON,
        "me/projects/p1/integrations/webhooks",
    ),
    (
        ep.UpdateWebhook("p1", "w1", UPDATE_REQUEST),
        ApiBase.INTERNAL,
        HttpMethod.PUT,
        ParameterEncoding.JSON,
        "me/projects/p1/integrations/webhooks/w1",
    ),
    (
        ep.DeleteWebhook("p1", "w1"),
        ApiBase.INTERNAL,
        HttpMethod.DELETE,
        ParameterEncoding.QUERY,
        "me/projects/p1/integrations/webhooks/w1",
    ),
    (
        ep.TestWebhook("p1", "w1"),
        ApiBase.INTERNAL,
        HttpMethod.POST,
        ParameterEncoding.QUERY,
        "me/projects/p1/integrations/webhooks/w1/test_webhook",
    ),
]


def test_catalog_covers_every_variant():
    """Every endpoint type appears in the resolution table"""
    assert {type(row[0]) for row in CATALOG} == set(ep.ENDPOINT_TYPES)


@pytest.mark.parametrize("endpoint,base,method,encoding,path", CATALOG)
def test_resolution_table(endpoint, base, method, encoding, path, test_settings: Settings):
    """Base, verb, encoding and path for each variant"""
    request = resolve(endpoint, config=test_settings)

    assert request.base is base
    assert request.method is method
    assert request.encoding is encoding
    assert request.path == path


@pytest.mark.parametrize("endpoint", [row[0] for row in CATALOG])
def test_resolution_is_deterministic(endpoint, test_settings: Settings):
    """Resolving the same input twice yields identical requests"""
    first = resolve(endpoint, token="tok", config=test_settings)
    second = resolve(endpoint, token="tok", config=test_settings)

    assert first == second


@pytest.mark.parametrize("endpoint", [row[0] for row in CATALOG])
def test_sandbox_mode_only_on_overview_and_subscriber_reads(endpoint, test_settings: Settings):
    """sandbox_mode=false is injected for overview and subscriber detail/activity only"""
    parameters = resolve(endpoint, config=test_settings).parameters or {}

    if isinstance(endpoint, (ep.Overview, ep.TransactionDetail, ep.TransactionDetailActivity)):
        assert parameters == {"sandbox_mode": False}
    else:
        assert "sandbox_mode" not in parameters


def test_payload_variants_forward_their_request(test_settings: Settings):
    """Login/charts/transactions/webhook writes send their payload verbatim"""
    assert resolve(ep.Login(LOGIN_REQUEST), config=test_settings).body == {
        "email": "dev@example.com",
        "password": "secret",
    }
    assert resolve(ep.Transactions(ep.TransactionsRequest(limit=10)), config=test_settings).query == {"limit": 10}
    assert resolve(ep.UpdateWebhook("p1", "w1", UPDATE_REQUEST), config=test_settings).body == {
        "url": "https://hooks.example.com/new",
    }


def test_parameterless_variants_send_nothing(test_settings: Settings):
    for endpoint in (ep.Logout(), ep.Me(), ep.Projects(), ep.DeleteWebhook("p1", "w1"), ep.TestWebhook("p1", "w1")):
        request = resolve(endpoint, config=test_settings)
        assert request.parameters is None
        assert request.query is None
        assert request.body is None


def test_create_webhook_event_types_render_as_list():
    request = ep.CreateWebhookRequest(
        name="Slack",
        url="https://hooks.example.com/rc",
        event_types=("INITIAL_PURCHASE", "RENEWAL"),
    )

    assert request.to_params()["event_types"] == ["INITIAL_PURCHASE", "RENEWAL"]


def test_headers_without_credential(test_settings: Settings):
    request = resolve(ep.Me(), config=test_settings)

    assert request.headers == {"X-Requested-With": "XMLHttpRequest"}


def test_headers_with_credential(test_settings: Settings):
    request = resolve(ep.Me(), token="abc123", config=test_settings)

    assert request.headers["Authorization"] == "Bearer abc123"
    assert request.headers["X-Requested-With"] == "XMLHttpRequest"


@pytest.mark.parametrize("endpoint", [ep.Logout(), ep.DeleteWebhook("p1", "w1"), ep.TestWebhook("p1", "w1")])
def test_bodyless_writes_declare_json_content_type(endpoint, test_settings: Settings):
    assert resolve(endpoint, config=test_settings).headers["Content-Type"] == "application/json"


def test_other_variants_omit_content_type(test_settings: Settings):
    for endpoint in (ep.Me(), ep.Login(LOGIN_REQUEST), ep.CreateWebhook("p1", CREATE_REQUEST)):
        assert "Content-Type" not in resolve(endpoint, config=test_settings).headers


def test_chart_request_resolves_to_public_charts_url(test_settings: Settings):
    request = resolve(ep.Charts(CHART_REQUEST), config=test_settings)

    assert request.method is HttpMethod.GET
    assert request.url == "https://api.revenuecat.com/v1/developers/me/charts_v2/mrr"
    assert request.query == {"resolution": "day", "start_date": "2024-02-01", "end_date": "2024-02-28"}


def test_delete_webhook_resolves_to_internal_url(test_settings: Settings):
    request = resolve(ep.DeleteWebhook(project_id="p1", webhook_id="w1"), config=test_settings)

    assert request.method is HttpMethod.DELETE
    assert request.url == "https://api.revenuecat.com/internal/v1/developers/me/projects/p1/integrations/webhooks/w1"
    assert request.headers["Content-Type"] == "application/json"
    assert request.body is None


def test_configured_host_is_used():
    config = Settings(_env_file=None, api_host="https://api.example.test/")

    assert resolve(ep.Me(), config=config).url == "https://api.example.test/v1/developers/me"
    assert resolve(ep.Projects(), config=config).url == "https://api.example.test/internal/v1/developers/me/projects"


def test_resolve_rejects_unknown_values():
    with pytest.raises(TypeError):
        resolve("me")
