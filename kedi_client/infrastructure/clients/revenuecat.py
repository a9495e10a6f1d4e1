"""RevenueCat developer API client: dispatch, auth header and typed decoding"""

import time
from datetime import date
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from kedi_client.config import Settings, settings
from kedi_client.domain import endpoints as ep
from kedi_client.domain.endpoints import Endpoint, ResolvedRequest, resolve
from kedi_client.domain.exceptions import DecodingError, ServiceError, TransportError
from kedi_client.infrastructure.clients.schemas import (
    ChartResponse,
    ErrorResponse,
    LoginResponse,
    MeResponse,
    OverviewResponse,
    Project,
    ProjectsResponse,
    TransactionActivityResponse,
    TransactionDetailResponse,
    TransactionsResponse,
    Webhook,
    WebhooksResponse,
)
from kedi_client.infrastructure.observability.logging import log_dispatch
from kedi_client.infrastructure.observability.metrics import record_dispatch
from kedi_client.infrastructure.session import CredentialProvider, Session

T = TypeVar("T", bound=BaseModel)


class RevenueCatClient:
    """
    Client for the RevenueCat developer API.

    Every call is independent: no retries, no caching, no de-duplication and
    no automatic credential refresh. A 401 is reported as
    `ServiceError(401, ...)` and the caller decides whether to re-authenticate.
    """

    def __init__(
        self,
        session: CredentialProvider | None = None,
        config: Settings | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session = session if session is not None else Session()
        self.config = config or settings
        self.timeout = timeout or self.config.http_timeout_seconds
        self._transport = transport

    async def execute(self, endpoint: Endpoint, model: Optional[Type[T]] = None) -> Optional[T]:
        """
        Dispatch one endpoint call and decode its body into `model`.

        Returns None when `model` is None or the success response has no body.

        Raises:
            TransportError: Connection, TLS or timeout failure
            ServiceError: 4xx/5xx status, with the decoded error envelope if any
            DecodingError: Success body does not match `model`
        """
        request = resolve(endpoint, token=self.session.token, config=self.config)
        start_time = time.perf_counter()

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.request(
                    request.method.value,
                    request.url,
                    params=request.query,
                    json=request.body,
                    headers=request.headers,
                )
            except httpx.RequestError as e:
                error = TransportError(e)
                self._record(request, error.kind, start_time)
                raise error from e

        if response.status_code >= 400:
            error = ServiceError(response.status_code, self._decode_error(response))
            self._record(request, error.kind, start_time, response.status_code)
            raise error

        if model is None or not response.content.strip():
            self._record(request, "success", start_time, response.status_code)
            return None

        try:
            result = model.model_validate_json(response.content)
        except ValidationError as e:
            error = DecodingError(e)
            self._record(request, error.kind, start_time, response.status_code)
            raise error from e

        self._record(request, "success", start_time, response.status_code)
        return result

    @staticmethod
    def _decode_error(response: httpx.Response) -> Optional[ErrorResponse]:
        """Best effort: an undecodable error body degrades to a bare status code"""
        if not response.content.strip():
            return None
        try:
            return ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            return None

    @staticmethod
    def _record(request: ResolvedRequest, outcome: str, start_time: float, status_code: int | None = None) -> None:
        duration = time.perf_counter() - start_time
        record_dispatch(request.endpoint_name, outcome, duration, status_code)
        log_dispatch(request.endpoint_name, request.method.value, status_code, outcome, duration * 1000)

    # Auth

    async def login(self, email: str, password: str, otp_code: str | None = None) -> LoginResponse:
        """Sign in and store the returned bearer token in the session"""
        response = await self.execute(ep.Login(ep.LoginRequest(email, password, otp_code)), LoginResponse)
        if response is None:
            raise DecodingError(ValueError("Login response had no body"))
        self.session.set_token(response.authentication_token)
        return response

    async def logout(self) -> None:
        """Sign out; the local session is cleared even if the call fails"""
        try:
            await self.execute(ep.Logout())
        finally:
            self.session.clear()

    async def me(self) -> Optional[MeResponse]:
        return await self.execute(ep.Me(), MeResponse)

    # Projects

    async def projects(self) -> Optional[ProjectsResponse]:
        return await self.execute(ep.Projects(), ProjectsResponse)

    async def project_detail(self, project_id: str) -> Optional[Project]:
        return await self.execute(ep.ProjectDetail(project_id), Project)

    # Overview & charts

    async def overview(self) -> Optional[OverviewResponse]:
        return await self.execute(ep.Overview(), OverviewResponse)

    async def chart(
        self,
        name: ep.ChartName,
        resolution: ep.ChartResolution,
        start_date: date,
        end_date: date,
    ) -> Optional[ChartResponse]:
        request = ep.ChartRequest(name=name, resolution=resolution, start_date=start_date, end_date=end_date)
        return await self.execute(ep.Charts(request), ChartResponse)

    # Transactions

    async def transactions(self, limit: int | None = 50, start_from: str | None = None) -> Optional[TransactionsResponse]:
        request = ep.TransactionsRequest(limit=limit, start_from=start_from)
        return await self.execute(ep.Transactions(request), TransactionsResponse)

    async def transaction_detail(self, project_id: str, subscriber_id: str) -> Optional[TransactionDetailResponse]:
        return await self.execute(ep.TransactionDetail(project_id, subscriber_id), TransactionDetailResponse)

    async def transaction_activity(self, project_id: str, subscriber_id: str) -> Optional[TransactionActivityResponse]:
        return await self.execute(ep.TransactionDetailActivity(project_id, subscriber_id), TransactionActivityResponse)

    # Webhooks

    async def webhooks(self, project_id: str) -> Optional[WebhooksResponse]:
        return await self.execute(ep.Webhooks(project_id), WebhooksResponse)

    async def create_webhook(self, project_id: str, request: ep.CreateWebhookRequest) -> Optional[Webhook]:
        return await self.execute(ep.CreateWebhook(project_id, request), Webhook)

    async def update_webhook(self, project_id: str, webhook_id: str, request: ep.UpdateWebhookRequest) -> Optional[Webhook]:
        return await self.execute(ep.UpdateWebhook(project_id, webhook_id, request), Webhook)

    async def delete_webhook(self, project_id: str, webhook_id: str) -> None:
        await self.execute(ep.DeleteWebhook(project_id, webhook_id))

    async def test_webhook(self, project_id: str, webhook_id: str) -> None:
        await self.execute(ep.TestWebhook(project_id, webhook_id))
