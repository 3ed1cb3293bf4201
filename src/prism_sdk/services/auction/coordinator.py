# -*- coding: utf-8 -*-
"""AuctionCoordinator: deduplicated, retried auctions and the idempotent init() entry point."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional
from structlog.contextvars import bound_contextvars

from prism_sdk.events.auction_events import AuctionFailedEvent, AuctionWonEvent
from prism_sdk.exceptions import (
    AlreadyCompletedError,
    AlreadyPendingError,
    AuctionDedupError,
    InvalidResponseError,
    MissingRequiredConfigError,
    PrismAPIError,
)
from prism_sdk.models.keys import AuctionKey, DetectionKey
from prism_sdk.models.options import AuctionOptions, InitOptions
from prism_sdk.models.outcome import InitOutcome
from prism_sdk.models.winner import AuctionWinner
from prism_sdk.services.auction.state import AuctionState
from prism_sdk.services.wallet_detection import WalletDetector
from prism_sdk.utils.callbacks import invoke_callback
from prism_sdk.utils.retry import with_retry
from prism_sdk.utils.validation import mask_address

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from prism_sdk.clients.encryption import AddressEncryptor
    from prism_sdk.clients.http import AsyncHttpClient
    from prism_sdk.config import Settings


class AuctionCoordinator:
    """Requests auction winners from the enclave, at most once per (publisher, domain, wallet).

    auction() is a plain retried request. auto_auction() adds the
    pending/completed protocol and raises AlreadyPendingError /
    AlreadyCompletedError. init() resolves the wallet, runs auto_auction()
    and never raises: it is meant to be called on every wallet change.
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        encryptor: "AddressEncryptor",
        settings: "Settings",
        *,
        state: Optional[AuctionState] = None,
        wallet_detector: Optional[WalletDetector] = None,
        event_bus: Any = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            http_client: Async HTTP client used for the enclave request.
            encryptor: Encrypts the wallet address before it leaves the client.
            settings: SDK settings (api.*, auction.*).
            state: Registries to use (a fresh AuctionState if None).
            wallet_detector: Detector sharing state.active_detections (built if None).
            event_bus: Optional bubus EventBus receiving AuctionWonEvent/AuctionFailedEvent.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._encryptor = encryptor
        self._settings = settings
        self._state = state if state is not None else AuctionState()
        self._placeholder = settings.auction.unconnected_address
        self._detector = wallet_detector or WalletDetector(
            self._state.active_detections,
            placeholder_address=self._placeholder,
            get_logger=get_logger,
        )
        self._event_bus: Optional["EventBus"] = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def state(self) -> AuctionState:
        return self._state

    def _auction_url(self) -> str:
        base = self._settings.api.enclave_url.rstrip("/")
        if not base:
            raise MissingRequiredConfigError("API__ENCLAVE_URL")
        return f"{base}{self._settings.api.auction_path}"

    def _retries(self, options: AuctionOptions) -> int:
        return options.retries if options.retries is not None else self._settings.api.max_retries

    def _timeout(self, options: AuctionOptions) -> float:
        return options.timeout if options.timeout is not None else self._settings.api.timeout_seconds

    def encrypt_address(self, address: str) -> str:
        """Encrypt a wallet address the way auction requests do (base64 ciphertext)."""
        return self._encryptor.encrypt(address)

    async def _request_winner(
        self,
        url: str,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: str,
        timeout: float,
    ) -> AuctionWinner:
        """One attempt: encrypt, POST, map the response."""
        user_address = self._encryptor.encrypt(wallet_address)
        response = await self._http.post(
            url,
            json={
                "publisher_address": publisher_address,
                "user_address": user_address,
                "publisher_domain": publisher_domain,
            },
            timeout=timeout,
        )
        response.raise_for_status()

        payload = response.payload
        if not isinstance(payload, dict):
            raise InvalidResponseError(
                "Auction response is not a JSON object",
                url=url,
                status_code=response.status,
            )
        app_status = payload.get("status")
        if app_status is not None and app_status != "success":
            raise InvalidResponseError(
                f"Auction failed with status {app_status!r}: {payload.get('message', '')}",
                url=url,
                status_code=response.status,
            )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise InvalidResponseError(
                "Auction response has no data object",
                url=url,
                status_code=response.status,
            )
        try:
            return AuctionWinner.from_data(data)
        except KeyError as e:
            raise InvalidResponseError(
                f"Auction response is missing field {e}",
                url=url,
                status_code=response.status,
            ) from e

    async def _run_auction(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: str,
        options: AuctionOptions,
    ) -> AuctionWinner:
        url = self._auction_url()
        timeout = self._timeout(options)
        return await with_retry(
            lambda: self._request_winner(
                url, publisher_address, publisher_domain, wallet_address, timeout
            ),
            self._retries(options),
            base_delay=self._settings.api.retry_base_delay_seconds,
            logger=self._logger,
        )

    async def auction(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: str,
        options: Optional[AuctionOptions] = None,
    ) -> AuctionWinner:
        """Run one auction for the wallet, retried with backoff, without deduplication.

        Raises:
            EncryptionError, PrismAPIError, MissingRequiredConfigError: The last
                failure once retries are exhausted (on_error is called first).
        """
        opts = options or AuctionOptions()
        with bound_contextvars(
            publisher_address=publisher_address,
            publisher_domain=publisher_domain,
            wallet_masked=mask_address(wallet_address),
        ):
            try:
                winner = await self._run_auction(
                    publisher_address, publisher_domain, wallet_address, opts
                )
            except Exception as e:
                self._on_auction_failed(publisher_address, publisher_domain, wallet_address, e)
                await invoke_callback(opts.on_error, e, logger=self._logger, event="auction_on_error_callback_failed")
                raise
            self._on_auction_won(publisher_address, publisher_domain, wallet_address, winner, deduplicated=False)
            await invoke_callback(opts.on_success, winner, logger=self._logger, event="auction_on_success_callback_failed")
            return winner

    async def auto_auction(
        self,
        publisher_address: str,
        publisher_domain: str,
        connected_wallet: Optional[str] = None,
        options: Optional[AuctionOptions] = None,
    ) -> AuctionWinner:
        """Run the auction for (publisher, domain, wallet) at most once.

        Without a connected wallet the placeholder (unconnected) address is used.

        Raises:
            AlreadyCompletedError: A winner was already obtained for the key.
            AlreadyPendingError: An auction for the key is in flight.
            Exception: The auction failure; the key becomes eligible again.
        """
        opts = options or AuctionOptions()
        wallet_address = connected_wallet or self._placeholder
        key = AuctionKey(publisher_address, publisher_domain, wallet_address)

        with bound_contextvars(
            publisher_address=publisher_address,
            publisher_domain=publisher_domain,
            wallet_masked=mask_address(wallet_address),
        ):
            try:
                self._state.claim(key)
            except AuctionDedupError as e:
                self._logger.debug(
                    "auto_auction_deduplicated",
                    auction_status=self._state.status(key),
                )
                await invoke_callback(opts.on_error, e, logger=self._logger, event="auction_on_error_callback_failed")
                raise

            try:
                winner = await self._run_auction(
                    publisher_address, publisher_domain, wallet_address, opts
                )
            except Exception as e:
                self._state.release(key)
                self._on_auction_failed(publisher_address, publisher_domain, wallet_address, e)
                await invoke_callback(opts.on_error, e, logger=self._logger, event="auction_on_error_callback_failed")
                raise

            self._state.complete(key)
            self._on_auction_won(publisher_address, publisher_domain, wallet_address, winner, deduplicated=True)
            await invoke_callback(opts.on_success, winner, logger=self._logger, event="auction_on_success_callback_failed")
            return winner

    async def init(
        self,
        publisher_address: str,
        publisher_domain: str,
        options: Optional[InitOptions] = None,
    ) -> Optional[AuctionWinner]:
        """Idempotent entry point: the winner, or None when nothing happened or it failed.

        Never raises. Safe to call on every wallet-state change.
        """
        outcome = await self.init_outcome(publisher_address, publisher_domain, options)
        return outcome.winner

    async def init_outcome(
        self,
        publisher_address: str,
        publisher_domain: str,
        options: Optional[InitOptions] = None,
    ) -> InitOutcome:
        """Same as init() but reports whether the call succeeded, was skipped or failed."""
        opts = options or InitOptions()
        if not opts.auto_trigger:
            return InitOutcome.skipped("auto_trigger_disabled")

        scope = self._settings.auction.single_flight_scope
        detection_key = DetectionKey(publisher_address, publisher_domain)
        if not self._state.try_acquire_init(scope, detection_key):
            self._logger.debug(
                "auction_init_skipped",
                init_skip_reason="init_in_progress",
                init_single_flight_scope=scope,
            )
            return InitOutcome.skipped("init_in_progress")

        try:
            with bound_contextvars(
                publisher_address=publisher_address,
                publisher_domain=publisher_domain,
            ):
                outcome = await self._init_guarded(detection_key, opts)
        finally:
            self._state.release_init(scope, detection_key)

        if outcome.status == "succeeded":
            await invoke_callback(opts.on_success, outcome.winner, logger=self._logger, event="init_on_success_callback_failed")
        elif outcome.status == "failed":
            await invoke_callback(opts.on_error, outcome.error, logger=self._logger, event="init_on_error_callback_failed")
        return outcome

    async def _init_guarded(self, detection_key: DetectionKey, opts: InitOptions) -> InitOutcome:
        publisher_address = detection_key.publisher_address
        publisher_domain = detection_key.publisher_domain
        try:
            wallet_address = await self._resolve_wallet(detection_key, opts)
            key = AuctionKey(publisher_address, publisher_domain, wallet_address)
            status = self._state.status(key)
            if status != "absent":
                self._logger.debug(
                    "auction_init_skipped",
                    init_skip_reason=f"already_{status}",
                    wallet_masked=mask_address(wallet_address),
                )
                return InitOutcome.skipped("already_completed" if status == "completed" else "already_pending")

            winner = await self.auto_auction(
                publisher_address,
                publisher_domain,
                wallet_address,
                opts.auction_options(),
            )
        except AlreadyCompletedError:
            return InitOutcome.skipped("already_completed")
        except AlreadyPendingError:
            return InitOutcome.skipped("already_pending")
        except Exception as e:
            self._logger.warning(
                "auction_init_failed",
                error_type=type(e).__name__,
                error_message=str(e),
                http_status_code=e.status_code if isinstance(e, PrismAPIError) else None,
            )
            return InitOutcome.failed(e)
        return InitOutcome.succeeded(winner)

    async def _resolve_wallet(self, detection_key: DetectionKey, opts: InitOptions) -> str:
        """connected_wallet, else the probe (read now, then polled every interval), else the placeholder."""
        if opts.connected_wallet:
            return opts.connected_wallet
        if opts.wallet_probe is None:
            return self._placeholder

        address = await self._detector.probe_once(opts.wallet_probe)
        if address is None:
            timeout = (
                opts.wallet_detection_timeout
                if opts.wallet_detection_timeout is not None
                else self._settings.auction.wallet_detection_timeout_seconds
            )
            interval = (
                opts.wallet_detection_interval
                if opts.wallet_detection_interval is not None
                else self._settings.auction.wallet_detection_interval_seconds
            )
            if timeout > 0:
                # The probe was just read; the next poll is one interval away.
                address = await self._detector.detect(
                    detection_key,
                    opts.wallet_probe,
                    timeout,
                    interval,
                    initial_delay=interval,
                )
        return address or self._placeholder

    def reset_auction_state(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: Optional[str] = None,
    ) -> None:
        """Forget completed/pending auctions for a key, or for a whole publisher + domain.

        A pending request is not cancelled; its key is only forgotten.
        """
        removed = self._state.reset(publisher_address, publisher_domain, wallet_address)
        self._logger.debug(
            "auction_state_reset",
            publisher_address=publisher_address,
            publisher_domain=publisher_domain,
            wallet_masked=mask_address(wallet_address) if wallet_address else None,
            auction_state_removed=removed,
        )

    def _on_auction_won(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: str,
        winner: AuctionWinner,
        *,
        deduplicated: bool,
    ) -> None:
        self._logger.info(
            "auction_won",
            campaign_id=winner.campaign_id,
            campaign_name=winner.campaign_name,
        )
        if self._event_bus is None:
            return
        self._event_bus.dispatch(
            AuctionWonEvent(
                publisher_address=publisher_address,
                publisher_domain=publisher_domain,
                wallet_masked=mask_address(wallet_address),
                campaign_id=winner.campaign_id,
                campaign_name=winner.campaign_name,
                deduplicated=deduplicated,
            )
        )

    def _on_auction_failed(
        self,
        publisher_address: str,
        publisher_domain: str,
        wallet_address: str,
        error: Exception,
    ) -> None:
        status_code = error.status_code if isinstance(error, PrismAPIError) else None
        self._logger.warning(
            "auction_failed",
            error_type=type(error).__name__,
            error_message=str(error),
            http_status_code=status_code,
        )
        if self._event_bus is None:
            return
        self._event_bus.dispatch(
            AuctionFailedEvent(
                publisher_address=publisher_address,
                publisher_domain=publisher_domain,
                wallet_masked=mask_address(wallet_address),
                error_type=type(error).__name__,
                error_message=str(error),
                status_code=status_code,
            )
        )
