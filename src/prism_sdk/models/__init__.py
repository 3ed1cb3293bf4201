"""Domain models."""

from prism_sdk.models.keys import AuctionKey, DetectionKey
from prism_sdk.models.options import AuctionOptions, InitOptions, TrackingOptions
from prism_sdk.models.outcome import InitOutcome
from prism_sdk.models.tracking import TrackingKind, TrackingResponse
from prism_sdk.models.winner import AuctionWinner

__all__ = [
    "AuctionKey",
    "AuctionOptions",
    "AuctionWinner",
    "DetectionKey",
    "InitOptions",
    "InitOutcome",
    "TrackingKind",
    "TrackingOptions",
    "TrackingResponse",
]
