"""Exceptions subpackage."""

from prism_sdk.exceptions.exceptions import (
    AlreadyCompletedError,
    AlreadyPendingError,
    AuctionDedupError,
    EncryptionError,
    HttpStatusError,
    InvalidResponseError,
    MissingRequiredConfigError,
    PrismAPIError,
    PrismError,
    RequestTimeoutError,
    TransportError,
)

__all__ = [
    "AlreadyCompletedError",
    "AlreadyPendingError",
    "AuctionDedupError",
    "EncryptionError",
    "HttpStatusError",
    "InvalidResponseError",
    "MissingRequiredConfigError",
    "PrismAPIError",
    "PrismError",
    "RequestTimeoutError",
    "TransportError",
]
