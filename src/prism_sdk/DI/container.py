# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from prism_sdk.client import PrismClient
from prism_sdk.clients.encryption import RsaOaepAddressEncryptor
from prism_sdk.clients.http import AsyncHttpClient
from prism_sdk.config import Settings, get_settings
from prism_sdk.events.bus import get_event_bus
from prism_sdk.services.auction import AuctionCoordinator, AuctionState
from prism_sdk.services.tracking import TrackingClient
from prism_sdk.services.wallet_detection import WalletDetector


def _build_encryptor(settings: Settings) -> RsaOaepAddressEncryptor:
    """Build the encryptor with the configured key override, if any."""
    return RsaOaepAddressEncryptor(settings.encryption.public_key_pem)


def _build_wallet_detector(settings: Settings, state: AuctionState) -> WalletDetector:
    """Build the detector on the coordinator's active-detection registry."""
    return WalletDetector(
        state.active_detections,
        placeholder_address=settings.auction.unconnected_address,
    )


class Container(containers.DeclarativeContainer):
    """SDK container. Wires settings, HTTP client, encryptor, coordinator, tracking and facade."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    encryptor = providers.Singleton(_build_encryptor, config)

    event_bus = providers.Callable(get_event_bus)

    auction_state = providers.Singleton(AuctionState)

    wallet_detector = providers.Singleton(_build_wallet_detector, config, auction_state)

    auction_coordinator = providers.Singleton(
        AuctionCoordinator,
        http_client=http_client,
        encryptor=encryptor,
        settings=config,
        state=auction_state,
        wallet_detector=wallet_detector,
        event_bus=event_bus,
    )

    tracking_client = providers.Singleton(
        TrackingClient,
        http_client=http_client,
        settings=config,
        event_bus=event_bus,
    )

    prism_client = providers.Singleton(
        PrismClient,
        settings=config,
        http_client=http_client,
        encryptor=encryptor,
        coordinator=auction_coordinator,
        tracking_client=tracking_client,
    )
