"""Invoke user callbacks (sync or async) without letting them break the operation."""

from __future__ import annotations

import inspect
from typing import Any, Callable, Optional


async def invoke_callback(
    callback: Optional[Callable[[Any], Any]],
    value: Any,
    *,
    logger: Any,
    event: str,
) -> None:
    """Call callback(value), awaiting the result if it is awaitable.

    A callback that raises is logged under ``event`` and otherwise ignored.
    """
    if callback is None:
        return
    try:
        result = callback(value)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.exception(
            event,
            error_type=type(e).__name__,
            error_message=str(e),
        )
