"""Custom exceptions for the Prism SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prism_sdk.models.keys import AuctionKey


class PrismError(Exception):
    """Base exception for Prism SDK errors."""

    pass


class MissingRequiredConfigError(PrismError):
    """Raised when a required configuration value is missing."""

    pass


class EncryptionError(PrismError):
    """Raised when the enclave public key cannot be loaded or encryption fails."""

    pass


class PrismAPIError(PrismError):
    """Raised when a request to the enclave or tracking API fails."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class TransportError(PrismAPIError):
    """Raised when the request never produced an HTTP response (network failure)."""

    pass


class RequestTimeoutError(TransportError, TimeoutError):
    """Raised when a request attempt exceeded its deadline."""

    pass


class HttpStatusError(PrismAPIError):
    """Raised when the server answered with a non-2xx status."""

    pass


class InvalidResponseError(PrismAPIError):
    """Raised when a 2xx response does not carry the expected payload."""

    pass


class AuctionDedupError(PrismError):
    """Base for the auction deduplication signals raised by auto_auction()."""

    def __init__(self, message: str, *, key: "AuctionKey") -> None:
        super().__init__(message)
        self.key = key


class AlreadyCompletedError(AuctionDedupError):
    """Raised when a winner was already obtained for the auction key."""

    pass


class AlreadyPendingError(AuctionDedupError):
    """Raised when an auction for the same key is already in flight."""

    pass
