"""Identity keys for auction deduplication and shared wallet detection.

AuctionKey identifies one auction per (publisher, domain, wallet).
DetectionKey identifies one in-flight wallet detection per (publisher, domain).
"""

from __future__ import annotations

from dataclasses import dataclass

KEY_SEPARATOR = "|"


@dataclass(frozen=True, slots=True)
class DetectionKey:
    """Publisher + domain pair, independent of the wallet."""

    publisher_address: str
    publisher_domain: str

    def __str__(self) -> str:
        return f"{self.publisher_address}{KEY_SEPARATOR}{self.publisher_domain}"


@dataclass(frozen=True, slots=True)
class AuctionKey:
    """Publisher + domain + wallet. At most one winner is requested per key."""

    publisher_address: str
    publisher_domain: str
    wallet_address: str

    @property
    def detection_key(self) -> DetectionKey:
        return DetectionKey(self.publisher_address, self.publisher_domain)

    def matches(self, publisher_address: str, publisher_domain: str) -> bool:
        """Return True if the key belongs to the given publisher + domain."""
        return (
            self.publisher_address == publisher_address
            and self.publisher_domain == publisher_domain
        )

    def __str__(self) -> str:
        return KEY_SEPARATOR.join(
            (self.publisher_address, self.publisher_domain, self.wallet_address)
        )
