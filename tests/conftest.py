"""Pytest fixtures for testing"""

from typing import Callable, Generator

import httpx
import pytest
from fastapi import FastAPI

from kedi_client.config import Settings
from kedi_client.infrastructure.clients.revenuecat import RevenueCatClient
from kedi_client.infrastructure.session import Session
from mock_api.revenuecat_server.main import ACCOUNT_EMAIL, ACCOUNT_PASSWORD, app, reset_state


@pytest.fixture
def test_settings() -> Settings:
    """Default settings, isolated from any local .env"""
    return Settings(_env_file=None)


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def mock_backend() -> Generator[FastAPI, None, None]:
    """Mock RevenueCat API with fresh tokens and webhooks"""
    reset_state()
    yield app
    reset_state()


@pytest.fixture
def client(mock_backend: FastAPI, session: Session, test_settings: Settings) -> RevenueCatClient:
    """Client wired to the mock backend in-process"""
    return RevenueCatClient(
        session=session,
        config=test_settings,
        transport=httpx.ASGITransport(app=mock_backend),
    )


@pytest.fixture
async def signed_in_client(client: RevenueCatClient) -> RevenueCatClient:
    await client.login(ACCOUNT_EMAIL, ACCOUNT_PASSWORD)
    return client


@pytest.fixture
def make_client(session: Session, test_settings: Settings) -> Callable[..., RevenueCatClient]:
    """Build a client whose HTTP traffic goes to a handler function"""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> RevenueCatClient:
        return RevenueCatClient(session=session, config=test_settings, transport=httpx.MockTransport(handler))

    return factory
