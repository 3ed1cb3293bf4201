"""Prism SDK: encrypted ad auctions against the Prism enclave, plus click/impression tracking."""

from prism_sdk.client import PrismClient
from prism_sdk.clients import AsyncHttpClient, RsaOaepAddressEncryptor
from prism_sdk.config import UNCONNECTED_WALLET_ADDRESS, Settings, get_settings
from prism_sdk.DI import Container
from prism_sdk.models import (
    AuctionKey,
    AuctionOptions,
    AuctionWinner,
    InitOptions,
    InitOutcome,
    TrackingOptions,
    TrackingResponse,
)
from prism_sdk.services import (
    AuctionCoordinator,
    AuctionState,
    PublisherSession,
    TrackingClient,
    WalletDetector,
    WalletProbe,
)

__version__ = "0.1.0"
__all__ = [
    "UNCONNECTED_WALLET_ADDRESS",
    "AsyncHttpClient",
    "AuctionCoordinator",
    "AuctionKey",
    "AuctionOptions",
    "AuctionState",
    "AuctionWinner",
    "Container",
    "InitOptions",
    "InitOutcome",
    "PrismClient",
    "PublisherSession",
    "RsaOaepAddressEncryptor",
    "Settings",
    "TrackingClient",
    "TrackingOptions",
    "TrackingResponse",
    "WalletDetector",
    "WalletProbe",
    "get_settings",
]
