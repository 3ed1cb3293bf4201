"""Response of the tracking API (clicks, impressions)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal, Optional

TrackingKind = Literal["click", "impression"]


@dataclass(frozen=True, slots=True)
class TrackingResponse:
    """HTTP status plus the application-level ``data`` object of the tracking API."""

    status: int
    data: Optional[dict[str, Any]] = None
    message: Optional[str] = None

    @property
    def app_status(self) -> Optional[str]:
        """Application status reported inside ``data`` (e.g. "success")."""
        if self.data is None:
            return None
        value = self.data.get("status")
        return str(value) if value is not None else None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
