"""Auction orchestration (dedup registries + coordinator)."""

from prism_sdk.services.auction.coordinator import AuctionCoordinator
from prism_sdk.services.auction.state import AuctionState, AuctionStatus, SingleFlightScope

__all__ = ["AuctionCoordinator", "AuctionState", "AuctionStatus", "SingleFlightScope"]
