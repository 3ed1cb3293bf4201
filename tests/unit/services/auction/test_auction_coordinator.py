# -*- coding: utf-8 -*-
"""Unit tests for AuctionCoordinator.auction() and auto_auction()."""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from prism_sdk.clients.http import HttpResponse
from prism_sdk.config.config import Settings
from prism_sdk.events.auction_events import AuctionFailedEvent, AuctionWonEvent
from prism_sdk.exceptions import (
    AlreadyCompletedError,
    AlreadyPendingError,
    HttpStatusError,
    InvalidResponseError,
    MissingRequiredConfigError,
    RequestTimeoutError,
    TransportError,
)
from prism_sdk.models.keys import AuctionKey
from prism_sdk.models.options import AuctionOptions
from prism_sdk.models.winner import AuctionWinner
from prism_sdk.services.auction import AuctionCoordinator


def _coordinator(http_client: Any, encryptor: Any, settings: Settings, event_bus: Any = None) -> AuctionCoordinator:
    """Create coordinator with injected doubles."""
    return AuctionCoordinator(http_client, encryptor, settings, event_bus=event_bus)


def _transport_failure() -> HttpResponse:
    return HttpResponse(status=500, kind="transport_error", message="connection reset", url="https://enclave.test/auction")


async def test_auction_encrypts_wallet_once_and_sends_ciphertext(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)

    await coordinator.auction(publisher, domain, wallet)

    assert encryptor.calls == [wallet]
    call = http_client.calls[0]
    assert call.url == "https://enclave.test/auction"
    assert call.json == {
        "publisher_address": publisher,
        "user_address": base64.b64encode(f"enc:{wallet}".encode()).decode("ascii"),
        "publisher_domain": domain,
    }
    assert wallet not in str(call.json)
    assert call.auth_token is None


async def test_auction_maps_enclave_data_to_winner(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)

    winner = await coordinator.auction(publisher, domain, wallet)

    assert winner == AuctionWinner(
        banner_uri="ipfs://banner",
        campaign_id="cmp-42",
        campaign_name="Spring Launch",
        jwt_token="jwt-abc",
        target_url="https://advertiser.example/landing",
    )


async def test_auction_retries_with_exponential_backoff(
    monkeypatch: pytest.MonkeyPatch,
    http_client: Any,
    encryptor: Any,
    settings_factory: Callable[..., Settings],
    publisher: str,
    domain: str,
    wallet: str,
) -> None:
    sleep = AsyncMock()
    monkeypatch.setattr("prism_sdk.utils.retry.asyncio.sleep", sleep)
    http_client.queue = [_transport_failure(), _transport_failure()]
    coordinator = _coordinator(http_client, encryptor, settings_factory(retry_base_delay_seconds=1.0))

    winner = await coordinator.auction(publisher, domain, wallet)

    assert winner.campaign_id == "cmp-42"
    assert len(http_client.calls) == 3
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]
    assert len(encryptor.calls) == 3


async def test_auction_raises_last_failure_after_exhausting_retries(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [_transport_failure() for _ in range(5)]
    on_error = Mock()
    on_success = Mock()
    coordinator = _coordinator(http_client, encryptor, settings)

    with pytest.raises(TransportError, match="connection reset"):
        await coordinator.auction(publisher, domain, wallet, AuctionOptions(retries=4, on_error=on_error, on_success=on_success))

    assert len(http_client.calls) == 4
    on_error.assert_called_once()
    assert isinstance(on_error.call_args.args[0], TransportError)
    on_success.assert_not_called()


async def test_auction_passes_timeout_and_reports_timeouts(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [HttpResponse(status=408, kind="timeout", message="Request timed out after 0.1s")]

    with pytest.raises(RequestTimeoutError) as err:
        await _coordinator(http_client, encryptor, settings).auction(
            publisher, domain, wallet, AuctionOptions(retries=1, timeout=0.1)
        )

    assert err.value.status_code == 408
    assert http_client.calls[0].timeout == 0.1


async def test_auction_surfaces_http_status_in_error(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [HttpResponse(status=500, kind="http_error", message="HTTP error! status: 500, message: boom")]

    with pytest.raises(HttpStatusError, match="status: 500, message: boom"):
        await _coordinator(http_client, encryptor, settings).auction(publisher, domain, wallet, AuctionOptions(retries=1))


async def test_auction_rejects_payload_without_data(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [HttpResponse(status=200, payload={"status": "success"})]

    with pytest.raises(InvalidResponseError):
        await _coordinator(http_client, encryptor, settings).auction(publisher, domain, wallet, AuctionOptions(retries=1))


async def test_auction_rejects_non_success_status(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [HttpResponse(status=200, payload={"status": "error", "message": "no campaigns"})]

    with pytest.raises(InvalidResponseError, match="no campaigns"):
        await _coordinator(http_client, encryptor, settings).auction(publisher, domain, wallet, AuctionOptions(retries=1))


async def test_auction_rejects_data_missing_campaign_id(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [HttpResponse(status=200, payload={"status": "success", "data": {"jwt_token": "j"}})]

    with pytest.raises(InvalidResponseError, match="campaignId"):
        await _coordinator(http_client, encryptor, settings).auction(publisher, domain, wallet, AuctionOptions(retries=1))


async def test_auction_requires_enclave_url(
    http_client: Any, encryptor: Any, settings_factory: Callable[..., Settings], publisher: str, domain: str, wallet: str
) -> None:
    on_error = Mock()
    coordinator = _coordinator(http_client, encryptor, settings_factory(enclave_url=""))

    with pytest.raises(MissingRequiredConfigError, match="API__ENCLAVE_URL"):
        await coordinator.auction(publisher, domain, wallet, AuctionOptions(on_error=on_error))

    on_error.assert_called_once()
    assert http_client.calls == []


async def test_auction_does_not_deduplicate(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)

    await coordinator.auction(publisher, domain, wallet)
    await coordinator.auction(publisher, domain, wallet)

    assert len(http_client.calls) == 2
    assert coordinator.state.completed == set()
    assert coordinator.state.pending == set()


async def test_auction_calls_on_success_once_and_emits_event(
    http_client: Any, encryptor: Any, settings: Settings, event_bus: Any, publisher: str, domain: str, wallet: str
) -> None:
    received: list[AuctionWinner] = []

    async def _on_success(winner: AuctionWinner) -> None:
        received.append(winner)

    coordinator = _coordinator(http_client, encryptor, settings, event_bus)

    winner = await coordinator.auction(publisher, domain, wallet, AuctionOptions(on_success=_on_success))

    assert received == [winner]
    assert len(event_bus.dispatched) == 1
    event = event_bus.dispatched[0]
    assert isinstance(event, AuctionWonEvent)
    assert event.campaign_id == "cmp-42"
    assert event.deduplicated is False
    assert event.wallet_masked == "0x2d27...7706"


async def test_auction_result_survives_failing_callback(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    def _on_success(winner: AuctionWinner) -> None:
        raise RuntimeError("ui exploded")

    winner = await _coordinator(http_client, encryptor, settings).auction(
        publisher, domain, wallet, AuctionOptions(on_success=_on_success)
    )

    assert winner.campaign_id == "cmp-42"


async def test_auto_auction_uses_placeholder_without_wallet(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, placeholder: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)

    await coordinator.auto_auction(publisher, domain)

    assert encryptor.calls == [placeholder]
    assert coordinator.state.status(AuctionKey(publisher, domain, placeholder)) == "completed"


async def test_auto_auction_rejects_completed_key_without_request(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    on_error = Mock()
    coordinator = _coordinator(http_client, encryptor, settings)
    await coordinator.auto_auction(publisher, domain, wallet)

    with pytest.raises(AlreadyCompletedError):
        await coordinator.auto_auction(publisher, domain, wallet, AuctionOptions(on_error=on_error))

    assert len(http_client.calls) == 1
    on_error.assert_called_once()
    assert isinstance(on_error.call_args.args[0], AlreadyCompletedError)


async def test_auto_auction_concurrent_calls_send_one_request(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.gate = asyncio.Event()
    coordinator = _coordinator(http_client, encryptor, settings)

    first = asyncio.create_task(coordinator.auto_auction(publisher, domain, wallet))
    await asyncio.sleep(0)
    with pytest.raises(AlreadyPendingError):
        await coordinator.auto_auction(publisher, domain, wallet)
    http_client.gate.set()
    winner = await first

    assert winner.campaign_id == "cmp-42"
    assert len(http_client.calls) == 1
    assert coordinator.state.status(AuctionKey(publisher, domain, wallet)) == "completed"


async def test_auto_auction_failure_releases_key_for_retry(
    http_client: Any, encryptor: Any, settings: Settings, event_bus: Any, publisher: str, domain: str, wallet: str
) -> None:
    http_client.queue = [_transport_failure()]
    coordinator = _coordinator(http_client, encryptor, settings, event_bus)

    with pytest.raises(TransportError):
        await coordinator.auto_auction(publisher, domain, wallet, AuctionOptions(retries=1))

    key = AuctionKey(publisher, domain, wallet)
    assert coordinator.state.status(key) == "absent"
    assert isinstance(event_bus.dispatched[0], AuctionFailedEvent)
    assert event_bus.dispatched[0].status_code == 500

    winner = await coordinator.auto_auction(publisher, domain, wallet)

    assert winner.campaign_id == "cmp-42"
    assert coordinator.state.status(key) == "completed"
    assert event_bus.dispatched[1].deduplicated is True


async def test_auto_auction_runs_again_for_a_different_wallet(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)

    await coordinator.auto_auction(publisher, domain)
    await coordinator.auto_auction(publisher, domain, wallet)

    assert len(http_client.calls) == 2


async def test_reset_auction_state_reenables_completed_key(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)
    await coordinator.auto_auction(publisher, domain, wallet)

    coordinator.reset_auction_state(publisher, domain, wallet)
    await coordinator.auto_auction(publisher, domain, wallet)

    assert len(http_client.calls) == 2


async def test_reset_auction_state_without_wallet_clears_whole_publisher(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    coordinator = _coordinator(http_client, encryptor, settings)
    await coordinator.auto_auction(publisher, domain)
    await coordinator.auto_auction(publisher, domain, wallet)
    await coordinator.auto_auction(publisher, "other.example", wallet)

    coordinator.reset_auction_state(publisher, domain)

    assert coordinator.state.completed == {AuctionKey(publisher, "other.example", wallet)}


async def test_reset_while_pending_lets_a_new_request_start(
    http_client: Any, encryptor: Any, settings: Settings, publisher: str, domain: str, wallet: str
) -> None:
    http_client.gate = asyncio.Event()
    coordinator = _coordinator(http_client, encryptor, settings)
    first = asyncio.create_task(coordinator.auto_auction(publisher, domain, wallet))
    await asyncio.sleep(0)

    coordinator.reset_auction_state(publisher, domain, wallet)
    second = asyncio.create_task(coordinator.auto_auction(publisher, domain, wallet))
    await asyncio.sleep(0)
    http_client.gate.set()
    results = await asyncio.gather(first, second)

    assert [w.campaign_id for w in results] == ["cmp-42", "cmp-42"]
    assert len(http_client.calls) == 2


def test_encrypt_address_delegates_to_encryptor(
    http_client: Any, encryptor: Any, settings: Settings, wallet: str
) -> None:
    ciphertext = _coordinator(http_client, encryptor, settings).encrypt_address(wallet)

    assert base64.b64decode(ciphertext) == f"enc:{wallet}".encode()
