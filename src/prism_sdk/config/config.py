# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, API__ENCLAVE_URL.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

UNCONNECTED_WALLET_ADDRESS = "0x0000000000000000000000000000000000000000"


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "prism-sdk"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    # Per-target levels (only the 5 standard levels)
    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Local outputs
    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/prism_sdk.log"
    # Daily rotation (UTC midnight); number of rotated files to keep
    log_file_backup_count: int = 3

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    # Logfire integration via structlog
    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for the enclave auction endpoint and the tracking API (HTTP)."""

    model_config = SettingsConfigDict(extra="ignore")

    enclave_url: str = Field(
        default="",
        description="Base URL of the enclave that runs auctions (no trailing path).",
    )
    api_url: str = Field(
        default="",
        description="Base URL of the tracking API (clicks, impressions).",
    )
    auction_path: str = Field(default="/auction", description="Enclave auction endpoint path.")
    clicks_path: str = Field(
        default="/clicks",
        description="Tracking endpoint for clicks (older backends expose /click).",
    )
    impressions_path: str = Field(default="/impressions", description="Tracking endpoint for impressions.")
    timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Per-attempt HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum number of attempts for a request (first attempt included).",
    )
    retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Backoff before the second attempt; doubles after each failure.",
    )


class AuctionSettings(BaseSettings):
    """Configuration for auction orchestration and wallet detection."""

    model_config = SettingsConfigDict(extra="ignore")

    unconnected_address: str = Field(
        default=UNCONNECTED_WALLET_ADDRESS,
        description="Placeholder wallet used when no wallet is connected.",
    )
    wallet_detection_timeout_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="How long init() polls for a wallet before falling back to the placeholder.",
    )
    wallet_detection_interval_seconds: float = Field(
        default=0.1,
        gt=0.0,
        le=10.0,
        description="Polling interval for wallet detection.",
    )
    single_flight_scope: Literal["process", "publisher"] = Field(
        default="process",
        description=(
            "Scope of the init() single-flight guard: one init per coordinator ('process') "
            "or one per publisher+domain ('publisher')."
        ),
    )


class EncryptionSettings(BaseSettings):
    """Configuration for wallet address encryption."""

    model_config = SettingsConfigDict(extra="ignore")

    public_key_pem: Optional[str] = Field(
        default=None,
        description="SPKI PEM public key overriding the embedded enclave key.",
    )


class Settings(BaseSettings):
    """Root SDK configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, API__ENCLAVE_URL.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    auction: AuctionSettings = Field(default_factory=AuctionSettings)
    encryption: EncryptionSettings = Field(default_factory=EncryptionSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as flat keys or nested dicts, e.g.:
        - from_env(api__timeout_seconds=30)
        - from_env(api={"enclave_url": "https://enclave.example"})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from prism_sdk.config import get_settings

        settings = get_settings()
        timeout = settings.api.timeout_seconds
        scope = settings.auction.single_flight_scope
    """
    return Settings()
