"""Click and impression tracking."""

from prism_sdk.services.tracking.tracking_client import TrackingClient

__all__ = ["TrackingClient"]
