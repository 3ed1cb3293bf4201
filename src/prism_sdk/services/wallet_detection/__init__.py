"""Wallet detection (probe capability + bounded polling)."""

from prism_sdk.services.wallet_detection.probe import (
    CallableWalletProbe,
    WalletProbe,
    WalletProbeLike,
    as_wallet_probe,
)
from prism_sdk.services.wallet_detection.wallet_detector import WalletDetector

__all__ = [
    "CallableWalletProbe",
    "WalletDetector",
    "WalletProbe",
    "WalletProbeLike",
    "as_wallet_probe",
]
