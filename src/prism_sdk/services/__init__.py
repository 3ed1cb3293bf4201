"""SDK services (auction orchestration, wallet detection, tracking, sessions)."""

from prism_sdk.services.auction import AuctionCoordinator, AuctionState
from prism_sdk.services.session import PublisherSession
from prism_sdk.services.tracking import TrackingClient
from prism_sdk.services.wallet_detection import WalletDetector, WalletProbe

__all__ = [
    "AuctionCoordinator",
    "AuctionState",
    "PublisherSession",
    "TrackingClient",
    "WalletDetector",
    "WalletProbe",
]
