# -*- coding: utf-8 -*-
"""Event bus and event types."""

from prism_sdk.events.auction_events import (
    AuctionFailedEvent,
    AuctionWonEvent,
    TrackingEventSentEvent,
)
from prism_sdk.events.bus import get_event_bus, set_event_bus

__all__ = [
    "AuctionFailedEvent",
    "AuctionWonEvent",
    "TrackingEventSentEvent",
    "get_event_bus",
    "set_event_bus",
]
