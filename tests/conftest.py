# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from prism_sdk.clients.http import HttpResponse
from prism_sdk.config import UNCONNECTED_WALLET_ADDRESS
from prism_sdk.config.config import ApiSettings, AuctionSettings, Settings


class FakeEncryptor:
    """Deterministic encryptor recording every plaintext it was asked to encrypt."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def encrypt(self, plaintext: str) -> str:
        self.calls.append(plaintext)
        return base64.b64encode(f"enc:{plaintext}".encode()).decode("ascii")


class FakeHttpClient:
    """AsyncHttpClient double.

    Queued results (HttpResponse or Exception) are consumed first; afterwards
    the auction / tracking success payloads are returned. When ``gate`` is set,
    every request waits on it before answering.
    """

    def __init__(self, auction_data: dict[str, Any]) -> None:
        self.calls: list[SimpleNamespace] = []
        self.queue: list[Any] = []
        self.gate: asyncio.Event | None = None
        self.auction_data = auction_data

    async def post(
        self,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        auth_token: str | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        self.calls.append(SimpleNamespace(url=url, json=json, auth_token=auth_token, timeout=timeout))
        if self.gate is not None:
            await self.gate.wait()
        if self.queue:
            item = self.queue.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        if url.endswith("/auction"):
            return HttpResponse(status=200, payload={"status": "success", "data": dict(self.auction_data)}, url=url)
        return HttpResponse(status=200, payload={"data": {"status": "success"}, "message": "ok"}, url=url)

    async def aclose(self) -> None:
        return None


class FakeEventBus:
    """Minimal event bus fake for asserting dispatched events."""

    def __init__(self) -> None:
        self.dispatched: list[Any] = []

    def dispatch(self, event: Any) -> None:
        self.dispatched.append(event)


@pytest.fixture
def publisher() -> str:
    """Default publisher address used by tests."""
    return "0x1111111111111111111111111111111111111111"


@pytest.fixture
def domain() -> str:
    return "news.example.com"


@pytest.fixture
def wallet() -> str:
    """Default connected user wallet used by tests."""
    return "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"


@pytest.fixture
def placeholder() -> str:
    return UNCONNECTED_WALLET_ADDRESS


@pytest.fixture
def auction_data() -> dict[str, Any]:
    """The ``data`` object of a successful enclave auction response."""
    return {
        "jwt_token": "jwt-abc",
        "campaignId": "cmp-42",
        "bannerIpfsUri": "ipfs://banner",
        "url": "https://advertiser.example/landing",
        "campaignName": "Spring Launch",
    }


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings with test URLs and no retry backoff; keyword args override api/auction fields."""

    def _build(*, auction: dict[str, Any] | None = None, **api: Any) -> Settings:
        api_values: dict[str, Any] = {
            "enclave_url": "https://enclave.test",
            "api_url": "https://api.test",
            "retry_base_delay_seconds": 0.0,
        }
        api_values.update(api)
        return Settings(
            api=ApiSettings(**api_values),
            auction=AuctionSettings(**(auction or {})),
        )

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    return settings_factory()


@pytest.fixture
def encryptor() -> FakeEncryptor:
    return FakeEncryptor()


@pytest.fixture
def http_client(auction_data: dict[str, Any]) -> FakeHttpClient:
    return FakeHttpClient(auction_data)


@pytest.fixture
def event_bus() -> FakeEventBus:
    return FakeEventBus()
