"""AuctionState: in-memory registries behind auction deduplication.

One instance is owned by one AuctionCoordinator. All mutations happen
without awaiting in between, so check-then-insert is atomic on the event loop.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Literal, Optional

from prism_sdk.exceptions import AlreadyCompletedError, AlreadyPendingError
from prism_sdk.models.keys import AuctionKey, DetectionKey

AuctionStatus = Literal["absent", "pending", "completed"]
SingleFlightScope = Literal["process", "publisher"]


@dataclass
class AuctionState:
    """Pending/completed auction keys, active wallet detections and the init() guard."""

    completed: set[AuctionKey] = field(default_factory=set)
    """Keys that already produced a winner; only reset() removes them."""
    pending: set[AuctionKey] = field(default_factory=set)
    """Keys with a request in flight."""
    active_detections: dict[DetectionKey, "asyncio.Task[Optional[str]]"] = field(
        default_factory=dict
    )
    """At most one running wallet detection per publisher + domain."""
    is_requesting: bool = False
    """Process-scope init() guard."""
    requesting_keys: set[DetectionKey] = field(default_factory=set)
    """Publisher-scope init() guard."""

    def status(self, key: AuctionKey) -> AuctionStatus:
        if key in self.completed:
            return "completed"
        if key in self.pending:
            return "pending"
        return "absent"

    def claim(self, key: AuctionKey) -> None:
        """Move key from absent to pending.

        Raises:
            AlreadyCompletedError: A winner was already obtained for key.
            AlreadyPendingError: A request for key is in flight.
        """
        if key in self.completed:
            raise AlreadyCompletedError("Auction already completed for this key", key=key)
        if key in self.pending:
            raise AlreadyPendingError("Auction already in progress for this key", key=key)
        self.pending.add(key)

    def complete(self, key: AuctionKey) -> None:
        """Move key from pending to completed."""
        self.pending.discard(key)
        self.completed.add(key)

    def release(self, key: AuctionKey) -> None:
        """Drop key from pending after a failure; it becomes eligible again."""
        self.pending.discard(key)

    def try_acquire_init(self, scope: SingleFlightScope, key: DetectionKey) -> bool:
        """Take the init() guard for scope; False if already held."""
        if scope == "process":
            if self.is_requesting:
                return False
            self.is_requesting = True
            return True
        if key in self.requesting_keys:
            return False
        self.requesting_keys.add(key)
        return True

    def release_init(self, scope: SingleFlightScope, key: DetectionKey) -> None:
        if scope == "process":
            self.is_requesting = False
        else:
            self.requesting_keys.discard(key)

    def reset(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: Optional[str] = None,
    ) -> int:
        """Forget auction keys (and, without a wallet, the active detection).

        With a wallet, only that exact key is dropped from completed and pending.
        Without one, every key of the publisher + domain is dropped.

        Returns:
            Number of registry entries removed.
        """
        if wallet_address is not None:
            key = AuctionKey(publisher_address, publisher_domain, wallet_address)
            removed = int(key in self.completed) + int(key in self.pending)
            self.completed.discard(key)
            self.pending.discard(key)
            return removed

        stale_completed = {k for k in self.completed if k.matches(publisher_address, publisher_domain)}
        stale_pending = {k for k in self.pending if k.matches(publisher_address, publisher_domain)}
        self.completed -= stale_completed
        self.pending -= stale_pending
        removed = len(stale_completed) + len(stale_pending)
        if self.active_detections.pop(DetectionKey(publisher_address, publisher_domain), None) is not None:
            removed += 1
        return removed

    def clear(self) -> None:
        """Drop every entry (all publishers) and release the init() guards."""
        self.completed.clear()
        self.pending.clear()
        self.active_detections.clear()
        self.is_requesting = False
        self.requesting_keys.clear()
