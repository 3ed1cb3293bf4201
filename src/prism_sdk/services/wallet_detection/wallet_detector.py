# -*- coding: utf-8 -*-
"""WalletDetector: bounded polling for an asynchronously connecting wallet."""

from __future__ import annotations

import asyncio
import structlog
import time
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from prism_sdk.config import UNCONNECTED_WALLET_ADDRESS
from prism_sdk.models.keys import DetectionKey
from prism_sdk.services.wallet_detection.probe import WalletProbeLike, as_wallet_probe
from prism_sdk.utils.validation import is_connected_wallet, mask_address

ActiveDetections = Dict[DetectionKey, "asyncio.Task[Optional[str]]"]


class WalletDetector:
    """Polls a wallet probe until a real address appears or the deadline passes.

    detect() shares one in-flight poll loop per DetectionKey through the
    ``active_detections`` registry (usually owned by AuctionState), so
    concurrent callers for the same publisher + domain observe the same result.
    """

    def __init__(
        self,
        active_detections: Optional[ActiveDetections] = None,
        *,
        placeholder_address: str = UNCONNECTED_WALLET_ADDRESS,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the detector.

        Args:
            active_detections: Shared registry DetectionKey -> running task.
            placeholder_address: Address meaning "no wallet connected"; never accepted.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._active: ActiveDetections = active_detections if active_detections is not None else {}
        self._placeholder = placeholder_address
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def active_detections(self) -> ActiveDetections:
        return self._active

    async def probe_once(self, probe: WalletProbeLike) -> Optional[str]:
        """Read the probe once. Failures, empty values and the placeholder yield None."""
        try:
            address = await as_wallet_probe(probe).read()
        except Exception as e:
            self._logger.debug(
                "wallet_probe_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None
        if not is_connected_wallet(address, self._placeholder):
            return None
        return str(address).strip()

    async def wait_for_wallet(
        self,
        probe: WalletProbeLike,
        timeout: float,
        interval: float,
        *,
        initial_delay: float = 0.0,
    ) -> Optional[str]:
        """Poll probe every ``interval`` seconds while less than ``timeout`` seconds elapsed.

        The first poll happens after ``initial_delay`` seconds (immediately by
        default). The delay counts towards ``timeout``.

        Returns:
            The first connected address, or None when the deadline passes.
        """
        wallet_probe = as_wallet_probe(probe)
        started = time.monotonic()
        if initial_delay > 0:
            await asyncio.sleep(initial_delay)
        polls = 0
        while time.monotonic() - started < timeout:
            polls += 1
            address = await self.probe_once(wallet_probe)
            if address is not None:
                self._logger.debug(
                    "wallet_detected",
                    wallet_masked=mask_address(address),
                    wallet_polls=polls,
                )
                return address
            await asyncio.sleep(interval)
        self._logger.debug(
            "wallet_detection_timed_out",
            wallet_polls=polls,
            wallet_detection_timeout_seconds=timeout,
        )
        return None

    async def detect(
        self,
        key: DetectionKey,
        probe: WalletProbeLike,
        timeout: float,
        interval: float,
        *,
        initial_delay: float = 0.0,
    ) -> Optional[str]:
        """Wait for a wallet, joining the detection already running for ``key`` if any.

        The registry entry is dropped as soon as the detection settles. A
        caller being cancelled does not cancel the shared detection.
        """
        task = self._active.get(key)
        if task is None:
            task = asyncio.create_task(self._run_detection(key, probe, timeout, interval, initial_delay))
            self._active[key] = task
        else:
            with bound_contextvars(wallet_detection_key=str(key)):
                self._logger.debug("wallet_detection_joined")
        return await asyncio.shield(task)

    async def _run_detection(
        self,
        key: DetectionKey,
        probe: WalletProbeLike,
        timeout: float,
        interval: float,
        initial_delay: float,
    ) -> Optional[str]:
        try:
            with bound_contextvars(wallet_detection_key=str(key)):
                return await self.wait_for_wallet(probe, timeout, interval, initial_delay=initial_delay)
        finally:
            if self._active.get(key) is asyncio.current_task():
                del self._active[key]

    def forget(self, key: DetectionKey) -> None:
        """Drop the registry entry for key; a running detection keeps running for its awaiters."""
        self._active.pop(key, None)
