"""Dependency injection."""

from prism_sdk.DI.container import Container

__all__ = ["Container"]
