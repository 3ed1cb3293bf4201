"""AuctionWinner: the campaign selected by the enclave for one auction."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class AuctionWinner:
    """Winning campaign returned by the enclave auction endpoint.

    The enclave answers {"status": "success", "data": {...}}; this maps the
    ``data`` object (camelCase and snake_case keys as sent by the enclave).
    """

    banner_uri: str
    """Banner creative URI (``bannerIpfsUri``)."""
    campaign_id: str
    """Campaign identifier (``campaignId``)."""
    campaign_name: str
    """Human readable campaign name (``campaignName``)."""
    jwt_token: str
    """Token authorizing click/impression reports for this winner (``jwt_token``)."""
    target_url: str
    """Landing page of the campaign (``url``)."""

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> AuctionWinner:
        """Build from the ``data`` object of an auction response.

        Raises:
            KeyError: If campaignId or jwt_token is missing.
        """
        return cls(
            banner_uri=str(data.get("bannerIpfsUri") or ""),
            campaign_id=str(data["campaignId"]),
            campaign_name=str(data.get("campaignName") or ""),
            jwt_token=str(data["jwt_token"]),
            target_url=str(data.get("url") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
