"""InitOutcome: tagged result of AuctionCoordinator.init_outcome()."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional

if TYPE_CHECKING:
    from prism_sdk.models.winner import AuctionWinner

InitStatus = Literal["succeeded", "skipped", "failed"]
SkipReason = Literal[
    "auto_trigger_disabled",
    "init_in_progress",
    "already_completed",
    "already_pending",
]


@dataclass(frozen=True, slots=True)
class InitOutcome:
    """What happened during one init() call.

    succeeded: a winner was obtained (``winner`` set).
    skipped: nothing to do or a concurrent caller owns the work (``reason`` set).
    failed: the auction failed after retries (``error`` set).
    """

    status: InitStatus
    winner: Optional["AuctionWinner"] = None
    reason: Optional[SkipReason] = None
    error: Optional[Exception] = None

    @classmethod
    def succeeded(cls, winner: "AuctionWinner") -> InitOutcome:
        return cls(status="succeeded", winner=winner)

    @classmethod
    def skipped(cls, reason: SkipReason) -> InitOutcome:
        return cls(status="skipped", reason=reason)

    @classmethod
    def failed(cls, error: Exception) -> InitOutcome:
        return cls(status="failed", error=error)
