"""Validation helpers for wallet addresses."""

from __future__ import annotations

from typing import Any


def is_connected_wallet(addr: Any, placeholder: str) -> bool:
    """Return True if addr is a usable wallet: a non-empty string that is not the placeholder.

    The placeholder comparison ignores case and surrounding whitespace.
    """
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if not s:
        return False
    return s.lower() != placeholder.strip().lower()


def mask_address(addr: str | None) -> str:
    """Return a masked wallet address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"
