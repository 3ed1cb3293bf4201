# -*- coding: utf-8 -*-
"""PrismClient: SDK facade over the auction coordinator and tracking client."""

from __future__ import annotations

import structlog
from typing import Any, Callable, Optional

from prism_sdk.clients.encryption import AddressEncryptor, RsaOaepAddressEncryptor
from prism_sdk.clients.http import AsyncHttpClient
from prism_sdk.config import Settings, get_settings
from prism_sdk.models.options import AuctionOptions, InitOptions, TrackingOptions
from prism_sdk.models.outcome import InitOutcome
from prism_sdk.models.tracking import TrackingResponse
from prism_sdk.models.winner import AuctionWinner
from prism_sdk.services.auction import AuctionCoordinator
from prism_sdk.services.tracking import TrackingClient


class PrismClient:
    """Entry point of the SDK.

    Builds (or accepts) the HTTP client, encryptor, AuctionCoordinator and
    TrackingClient. Use as an async context manager, or call aclose(), to
    release the HTTP session.

    Example:

        async with PrismClient(settings) as client:
            winner = await client.init(publisher, domain, InitOptions(wallet_probe=get_wallet))
            if winner is not None:
                await client.impressions(publisher, page_url, winner.campaign_id, winner.jwt_token)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[AsyncHttpClient] = None,
        encryptor: Optional[AddressEncryptor] = None,
        coordinator: Optional[AuctionCoordinator] = None,
        tracking_client: Optional[TrackingClient] = None,
        event_bus: Any = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
    ) -> None:
        self._settings = settings or get_settings()
        self._http = http_client or AsyncHttpClient(self._settings, get_logger=get_logger)
        self._encryptor = encryptor or RsaOaepAddressEncryptor(
            self._settings.encryption.public_key_pem,
            get_logger=get_logger,
        )
        self._coordinator = coordinator or AuctionCoordinator(
            self._http,
            self._encryptor,
            self._settings,
            event_bus=event_bus,
            get_logger=get_logger,
        )
        self._tracking = tracking_client or TrackingClient(
            self._http,
            self._settings,
            event_bus=event_bus,
            get_logger=get_logger,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def coordinator(self) -> AuctionCoordinator:
        return self._coordinator

    @property
    def tracking(self) -> TrackingClient:
        return self._tracking

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> PrismClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def encrypt_address(self, address: str) -> str:
        return self._coordinator.encrypt_address(address)

    async def auction(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: str,
        options: Optional[AuctionOptions] = None,
    ) -> AuctionWinner:
        return await self._coordinator.auction(publisher_address, publisher_domain, wallet_address, options)

    async def auto_auction(
        self,
        publisher_address: str,
        publisher_domain: str,
        connected_wallet: Optional[str] = None,
        options: Optional[AuctionOptions] = None,
    ) -> AuctionWinner:
        return await self._coordinator.auto_auction(publisher_address, publisher_domain, connected_wallet, options)

    async def init(
        self,
        publisher_address: str,
        publisher_domain: str,
        options: Optional[InitOptions] = None,
    ) -> Optional[AuctionWinner]:
        return await self._coordinator.init(publisher_address, publisher_domain, options)

    async def init_outcome(
        self,
        publisher_address: str,
        publisher_domain: str,
        options: Optional[InitOptions] = None,
    ) -> InitOutcome:
        return await self._coordinator.init_outcome(publisher_address, publisher_domain, options)

    def reset_auction_state(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: Optional[str] = None,
    ) -> None:
        self._coordinator.reset_auction_state(publisher_address, publisher_domain, wallet_address)

    async def clicks(
        self,
        publisher_address: str,
        website_url: str,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions] = None,
    ) -> TrackingResponse:
        return await self._tracking.clicks(publisher_address, website_url, campaign_id, jwt_token, options)

    async def impressions(
        self,
        publisher_address: str,
        website_url: str,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions] = None,
    ) -> TrackingResponse:
        return await self._tracking.impressions(publisher_address, website_url, campaign_id, jwt_token, options)
