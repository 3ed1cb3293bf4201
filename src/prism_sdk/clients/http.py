# -*- coding: utf-8 -*-
"""Async HTTP client for the enclave and tracking API with per-request timeouts."""

from __future__ import annotations

import asyncio
import uuid
import aiohttp
import structlog
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Optional
from structlog.contextvars import bound_contextvars

from prism_sdk.config import Settings
from prism_sdk.exceptions import (
    HttpStatusError,
    RequestTimeoutError,
    TransportError,
)

HTTP_TIMEOUT_STATUS = 408
HTTP_TRANSPORT_FAILURE_STATUS = 500

ResponseKind = Literal["ok", "http_error", "timeout", "transport_error"]


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Uniform result of one HTTP request.

    Non-2xx statuses, timeouts and transport failures are carried as values
    (kind + status + message) instead of raised; raise_for_status() converts
    them into exceptions for callers that want to fail.
    """

    status: int
    kind: ResponseKind = "ok"
    payload: Any = None
    message: Optional[str] = None
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == "ok"

    def raise_for_status(self) -> None:
        """Raise the exception matching a failed result; no-op for 2xx.

        Raises:
            RequestTimeoutError: The attempt timed out.
            TransportError: The request never produced a response.
            HttpStatusError: The server answered with a non-2xx status.
        """
        if self.kind == "ok":
            return
        message = self.message or f"HTTP request failed with status {self.status}"
        if self.kind == "timeout":
            raise RequestTimeoutError(message, url=self.url, status_code=self.status)
        if self.kind == "transport_error":
            raise TransportError(message, url=self.url, status_code=self.status)
        raise HttpStatusError(message, url=self.url, status_code=self.status)


class AsyncHttpClient:
    """Async HTTP client (aiohttp) used by the auction coordinator and tracking client.

    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager. Retries are not done here; callers wrap
    requests in with_retry().
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (uses settings.api.timeout_seconds as default timeout).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def post(
        self,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        auth_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Perform one POST request with a JSON body.

        The request is abandoned once ``timeout`` seconds elapse.

        Args:
            url: Full URL to request.
            json: JSON-serializable body.
            auth_token: Optional bearer token for the Authorization header.
            timeout: Seconds before the attempt is abandoned (defaults to settings).

        Returns:
            HttpResponse: kind "ok" with the parsed JSON payload for 2xx,
            "http_error" with status and body text otherwise, "timeout" (408)
            or "transport_error" (500) when no response was obtained.
        """
        payload = json or {}
        request_id = uuid.uuid4().hex[:12]
        timeout_seconds = timeout if timeout is not None else self._settings.api.timeout_seconds
        headers = {"Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        with bound_contextvars(
            http_url=url,
            http_request_id=request_id,
            http_timeout_seconds=timeout_seconds,
        ):
            try:
                session = await self._get_session()
                async with session.post(
                    url,
                    json=payload,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=timeout_seconds),
                ) as response:
                    if not 200 <= response.status < 300:
                        body = await response.text()
                        self._logger.debug(
                            "http_post_error_status",
                            http_status_code=response.status,
                        )
                        return HttpResponse(
                            status=response.status,
                            kind="http_error",
                            message=f"HTTP error! status: {response.status}, message: {body}",
                            url=url,
                        )
                    data = await response.json(content_type=None)
                    return HttpResponse(status=response.status, payload=data, url=url)
            except asyncio.TimeoutError:
                self._logger.debug("http_post_timeout")
                return HttpResponse(
                    status=HTTP_TIMEOUT_STATUS,
                    kind="timeout",
                    message=f"Request timed out after {timeout_seconds}s",
                    url=url,
                )
            except (aiohttp.ClientError, ValueError) as e:
                self._logger.debug(
                    "http_post_transport_error",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return HttpResponse(
                    status=HTTP_TRANSPORT_FAILURE_STATUS,
                    kind="transport_error",
                    message=str(e) or type(e).__name__,
                    url=url,
                )
