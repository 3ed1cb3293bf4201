# -*- coding: utf-8 -*-
"""Utility modules."""

from prism_sdk.utils.callbacks import invoke_callback
from prism_sdk.utils.retry import backoff_delay, with_retry
from prism_sdk.utils.validation import (
    is_connected_wallet,
    mask_address,
)

__all__ = [
    "backoff_delay",
    "invoke_callback",
    "is_connected_wallet",
    "mask_address",
    "with_retry",
]
