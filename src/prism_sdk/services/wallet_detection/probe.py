"""WalletProbe: capability that reports the currently connected wallet, if any."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

WalletProbeResult = Union[Optional[str], Awaitable[Optional[str]]]


class WalletProbe(ABC):
    """Interface for reading the current wallet address (wallet provider, UI state, ...)."""

    @abstractmethod
    def get_wallet_address(self) -> WalletProbeResult:
        """Return the connected address, None/"" if none yet. May be a coroutine; may raise."""
        ...

    async def read(self) -> Optional[str]:
        """Call get_wallet_address() and await the result when needed."""
        result = self.get_wallet_address()
        if inspect.isawaitable(result):
            result = await result
        return result


class CallableWalletProbe(WalletProbe):
    """Adapts a plain function or coroutine function to WalletProbe."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn

    def get_wallet_address(self) -> WalletProbeResult:
        return self._fn()


WalletProbeLike = Union[WalletProbe, Callable[[], Any]]


def as_wallet_probe(probe: WalletProbeLike) -> WalletProbe:
    """Return probe as a WalletProbe, wrapping plain callables."""
    if isinstance(probe, WalletProbe):
        return probe
    if callable(probe):
        return CallableWalletProbe(probe)
    raise TypeError(f"wallet probe must be a WalletProbe or callable, got {type(probe).__name__}")
