"""Publisher-bound SDK session."""

from prism_sdk.services.session.publisher_session import PublisherSession

__all__ = ["PublisherSession"]
