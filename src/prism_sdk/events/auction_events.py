# -*- coding: utf-8 -*-
"""Auction and tracking events (bubus BaseEvent)."""

from __future__ import annotations

from typing import Literal, Optional

from bubus import BaseEvent  # type: ignore[import-untyped]


class AuctionWonEvent(BaseEvent[None]):
    """Emitted when the enclave returned a winner for an auction."""

    publisher_address: str
    publisher_domain: str
    wallet_masked: str
    campaign_id: str
    campaign_name: str
    deduplicated: bool = False
    """True when the auction went through the pending/completed registries."""


class AuctionFailedEvent(BaseEvent[None]):
    """Emitted when an auction failed after all retries."""

    publisher_address: str
    publisher_domain: str
    wallet_masked: str
    error_type: str
    error_message: str
    status_code: Optional[int] = None


class TrackingEventSentEvent(BaseEvent[None]):
    """Emitted after a click or impression report (successful or not)."""

    kind: Literal["click", "impression"]
    publisher_address: str
    campaign_id: str
    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None
