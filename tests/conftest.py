"""
XtreamEPG Test Configuration

Shared fixtures and configuration for all tests.
"""

import json
import os
from typing import Callable, Generator

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from xtreamepg.config import (
    EPGConfig,
    ProviderConfig,
    XtreamEPGConfig,
)
from xtreamepg.main import create_app
from xtreamepg.service import AddonService

from tests.fixtures.samples import EPG_URL, PROVIDER_URL, SAMPLE_LIVE_STREAMS, SAMPLE_XMLTV


# ============ HTTP Fixtures ============


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """
    Build a MockTransport answering the provider API and EPG feed.

    Keyword args:
        streams: JSON-able body (or raw str/bytes) for get_live_streams
        streams_status: HTTP status for the provider API
        epg: XMLTV body (str or bytes)
        epg_status: HTTP status for the EPG feed
    """

    def factory(
        streams=None,
        streams_status: int = 200,
        epg=SAMPLE_XMLTV,
        epg_status: int = 200,
    ) -> httpx.MockTransport:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if request.url.path == "/player_api.php":
                body = SAMPLE_LIVE_STREAMS if streams is None else streams
                if isinstance(body, (bytes, str)):
                    return httpx.Response(streams_status, content=body)
                return httpx.Response(streams_status, content=json.dumps(body))
            if request.url.host == "epg.test":
                content = epg.encode() if isinstance(epg, str) else epg
                return httpx.Response(epg_status, content=content)
            return httpx.Response(404)

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return factory


# ============ Config / Service Fixtures ============


@pytest.fixture
def config() -> XtreamEPGConfig:
    """A complete configuration pointing at the mock hosts."""
    return XtreamEPGConfig(
        provider=ProviderConfig(username="user", password="pass", server=PROVIDER_URL),
        epg=EPGConfig(url=EPG_URL),
    )


@pytest.fixture
def service(config: XtreamEPGConfig, make_transport) -> AddonService:
    http_client = httpx.AsyncClient(transport=make_transport())
    return AddonService(config, http_client=http_client)


@pytest.fixture
def app(service: AddonService) -> FastAPI:
    return create_app(service=service)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client without running the lifespan (no background refresh)."""
    return TestClient(app)


# ============ Environment Fixtures ============


ENV_VARS = (
    "IPTV_USER",
    "IPTV_PASS",
    "IPTV_SERVER",
    "EPG_URL",
    "PORT",
    "HOST",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[None, None, None]:
    """Clean environment variables for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key in ENV_VARS or key.startswith("XTREAMEPG_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_config_cache() -> Generator[None, None, None]:
    import xtreamepg.config as config_module

    config_module._config = None
    yield
    config_module._config = None
