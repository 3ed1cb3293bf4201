"""Logging setup (structlog + Logfire)."""

from prism_sdk.logging.config import configure_logging

__all__ = ["configure_logging"]
