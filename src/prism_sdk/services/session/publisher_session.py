# -*- coding: utf-8 -*-
"""PublisherSession: a PrismClient bound to one publisher + domain, with observable state."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional

from prism_sdk.models.options import AuctionOptions, InitOptions, TrackingOptions

if TYPE_CHECKING:
    from prism_sdk.client import PrismClient
    from prism_sdk.models.tracking import TrackingResponse
    from prism_sdk.models.winner import AuctionWinner


class PublisherSession:
    """Per-page helper for a publisher site.

    Keeps the last winner, the last error and whether init() is running, so a
    UI layer can subscribe to plain attributes. Every call clears the previous
    error; failures of auction/tracking calls are recorded and re-raised.
    """

    def __init__(
        self,
        client: "PrismClient",
        publisher_address: str,
        publisher_domain: str,
        *,
        website_url: Optional[str] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the session.

        Args:
            client: SDK client.
            publisher_address: Publisher wallet address.
            publisher_domain: Publisher domain (e.g. example.com).
            website_url: Page reported with clicks/impressions (defaults to the domain).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._client = client
        self.publisher_address = publisher_address
        self.publisher_domain = publisher_domain
        self.website_url = website_url or publisher_domain
        self.winner: Optional["AuctionWinner"] = None
        self.error: Optional[Exception] = None
        self.is_initializing = False
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def init(self, options: Optional[InitOptions] = None) -> Optional["AuctionWinner"]:
        """Run client.init() for this publisher; None if one is already running on this session."""
        if self.is_initializing:
            self._logger.debug("publisher_session_init_already_running")
            return None
        self.is_initializing = True
        self.error = None
        try:
            outcome = await self._client.init_outcome(
                self.publisher_address,
                self.publisher_domain,
                options,
            )
        finally:
            self.is_initializing = False
        if outcome.winner is not None:
            self.winner = outcome.winner
        if outcome.error is not None:
            self.error = outcome.error
        return outcome.winner

    async def auction(self, wallet_address: str, options: Optional[AuctionOptions] = None) -> "AuctionWinner":
        self.error = None
        try:
            winner = await self._client.auction(
                self.publisher_address, self.publisher_domain, wallet_address, options
            )
        except Exception as e:
            self.error = e
            raise
        self.winner = winner
        return winner

    async def auto_auction(
        self,
        connected_wallet: Optional[str] = None,
        options: Optional[AuctionOptions] = None,
    ) -> "AuctionWinner":
        self.error = None
        try:
            winner = await self._client.auto_auction(
                self.publisher_address, self.publisher_domain, connected_wallet, options
            )
        except Exception as e:
            self.error = e
            raise
        self.winner = winner
        return winner

    async def clicks(
        self,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions] = None,
    ) -> "TrackingResponse":
        self.error = None
        try:
            return await self._client.clicks(
                self.publisher_address, self.website_url, campaign_id, jwt_token, options
            )
        except Exception as e:
            self.error = e
            raise

    async def impressions(
        self,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions] = None,
    ) -> "TrackingResponse":
        self.error = None
        try:
            return await self._client.impressions(
                self.publisher_address, self.website_url, campaign_id, jwt_token, options
            )
        except Exception as e:
            self.error = e
            raise

    def reset_auction_state(self, wallet_address: Optional[str] = None) -> None:
        """Forget auctions for this publisher (or one wallet) and clear local state."""
        self._client.reset_auction_state(self.publisher_address, self.publisher_domain, wallet_address)
        self.winner = None
        self.error = None

    def encrypt_address(self, address: str) -> str:
        self.error = None
        try:
            return self._client.encrypt_address(address)
        except Exception as e:
            self.error = e
            raise
