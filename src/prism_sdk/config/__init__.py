"""Configuration subpackage."""

from prism_sdk.config.config import (
    UNCONNECTED_WALLET_ADDRESS,
    ApiSettings,
    AppSettings,
    AuctionSettings,
    EncryptionSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "UNCONNECTED_WALLET_ADDRESS",
    "ApiSettings",
    "AppSettings",
    "AuctionSettings",
    "EncryptionSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
