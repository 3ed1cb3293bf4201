# -*- coding: utf-8 -*-
"""TrackingClient: click and impression feedback for auction winners."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional
from structlog.contextvars import bound_contextvars

from prism_sdk.events.auction_events import TrackingEventSentEvent
from prism_sdk.exceptions import MissingRequiredConfigError, PrismAPIError
from prism_sdk.models.options import TrackingOptions
from prism_sdk.models.tracking import TrackingKind, TrackingResponse
from prism_sdk.utils.callbacks import invoke_callback
from prism_sdk.utils.retry import with_retry

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from prism_sdk.clients.http import AsyncHttpClient
    from prism_sdk.config import Settings


class TrackingClient:
    """Reports clicks and impressions to the tracking API (bearer JWT from the auction winner).

    No deduplication: reports are safe to repeat, idempotency is the
    backend's concern.
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: "Settings",
        *,
        event_bus: Any = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client.
            settings: SDK settings (uses api.api_url and the tracking paths).
            event_bus: Optional bubus EventBus receiving TrackingEventSentEvent.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._event_bus: Optional["EventBus"] = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _url(self, kind: TrackingKind) -> str:
        base = self._settings.api.api_url.rstrip("/")
        if not base:
            raise MissingRequiredConfigError("API__API_URL")
        path = self._settings.api.clicks_path if kind == "click" else self._settings.api.impressions_path
        return f"{base}{path}"

    async def clicks(
        self,
        publisher_address: str,
        website_url: str,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions] = None,
    ) -> TrackingResponse:
        """Report a click on the winning campaign.

        Raises:
            PrismAPIError: The last failure once retries are exhausted (on_error is called first).
        """
        return await self._send("click", publisher_address, website_url, campaign_id, jwt_token, options)

    async def impressions(
        self,
        publisher_address: str,
        website_url: str,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions] = None,
    ) -> TrackingResponse:
        """Report an impression of the winning campaign. Same contract as clicks()."""
        return await self._send("impression", publisher_address, website_url, campaign_id, jwt_token, options)

    async def _send(
        self,
        kind: TrackingKind,
        publisher_address: str,
        website_url: str,
        campaign_id: str,
        jwt_token: str,
        options: Optional[TrackingOptions],
    ) -> TrackingResponse:
        opts = options or TrackingOptions()
        retries = opts.retries if opts.retries is not None else self._settings.api.max_retries
        timeout = opts.timeout if opts.timeout is not None else self._settings.api.timeout_seconds
        body = {
            "publisherAddress": publisher_address,
            "websiteUrl": website_url,
            "campaignId": campaign_id,
        }

        with bound_contextvars(
            tracking_kind=kind,
            publisher_address=publisher_address,
            campaign_id=campaign_id,
        ):
            try:
                url = self._url(kind)

                async def _attempt() -> TrackingResponse:
                    response = await self._http.post(url, json=body, auth_token=jwt_token, timeout=timeout)
                    response.raise_for_status()
                    payload = response.payload if isinstance(response.payload, dict) else {}
                    data = payload.get("data")
                    return TrackingResponse(
                        status=response.status,
                        data=data if isinstance(data, dict) else None,
                        message=payload.get("message"),
                    )

                result = await with_retry(
                    _attempt,
                    retries,
                    base_delay=self._settings.api.retry_base_delay_seconds,
                    logger=self._logger,
                )
            except Exception as e:
                status_code = e.status_code if isinstance(e, PrismAPIError) else None
                self._logger.warning(
                    "tracking_report_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    http_status_code=status_code,
                )
                self._dispatch(kind, publisher_address, campaign_id, success=False, status_code=status_code, error_message=str(e))
                await invoke_callback(opts.on_error, e, logger=self._logger, event="tracking_on_error_callback_failed")
                raise

            self._logger.debug(
                "tracking_report_sent",
                http_status_code=result.status,
                tracking_app_status=result.app_status,
            )
            self._dispatch(kind, publisher_address, campaign_id, success=True, status_code=result.status)
            await invoke_callback(opts.on_success, result, logger=self._logger, event="tracking_on_success_callback_failed")
            return result

    def _dispatch(
        self,
        kind: TrackingKind,
        publisher_address: str,
        campaign_id: str,
        *,
        success: bool,
        status_code: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> None:
        if self._event_bus is None:
            return
        self._event_bus.dispatch(
            TrackingEventSentEvent(
                kind=kind,
                publisher_address=publisher_address,
                campaign_id=campaign_id,
                success=success,
                status_code=status_code,
                error_message=error_message,
            )
        )
