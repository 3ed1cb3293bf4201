"""Per-call options for auctions, tracking and init().

Any field left as None falls back to the configured default (Settings).
Callbacks may be plain functions or coroutine functions; they duplicate the
return value for event-driven callers and are never the only signal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from prism_sdk.models.tracking import TrackingResponse
    from prism_sdk.models.winner import AuctionWinner
    from prism_sdk.services.wallet_detection.probe import WalletProbeLike

ErrorCallback = Callable[[Exception], Any]
WinnerCallback = Callable[["AuctionWinner"], Any]
TrackingCallback = Callable[["TrackingResponse"], Any]


@dataclass(frozen=True, slots=True)
class AuctionOptions:
    """Options for auction() and auto_auction()."""

    retries: Optional[int] = None
    """Maximum attempts (first attempt included)."""
    timeout: Optional[float] = None
    """Per-attempt HTTP timeout in seconds."""
    on_success: Optional[WinnerCallback] = None
    on_error: Optional[ErrorCallback] = None


@dataclass(frozen=True, slots=True)
class TrackingOptions:
    """Options for clicks() and impressions()."""

    retries: Optional[int] = None
    timeout: Optional[float] = None
    on_success: Optional[TrackingCallback] = None
    on_error: Optional[ErrorCallback] = None


@dataclass(frozen=True, slots=True)
class InitOptions:
    """Options for init(), the idempotent entry point."""

    auto_trigger: bool = True
    """When False, init() returns without side effects."""
    connected_wallet: Optional[str] = None
    """Known wallet; skips the probe entirely."""
    wallet_probe: Optional["WalletProbeLike"] = None
    """Capability returning the current wallet (sync or async)."""
    wallet_detection_timeout: Optional[float] = None
    """Seconds to poll the probe; 0 disables polling after the first call."""
    wallet_detection_interval: Optional[float] = None
    """Seconds between polls."""
    retries: Optional[int] = None
    timeout: Optional[float] = None
    on_success: Optional[WinnerCallback] = None
    on_error: Optional[ErrorCallback] = None

    def auction_options(self) -> AuctionOptions:
        """Request options for the underlying auto_auction(), callbacks excluded."""
        return AuctionOptions(retries=self.retries, timeout=self.timeout)
