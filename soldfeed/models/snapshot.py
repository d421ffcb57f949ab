# soldfeed/models/snapshot.py

"""Snapshot model: the single persisted set of listings plus metadata."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from soldfeed.models.listing import Listing


def utc_timestamp(moment: datetime | None = None) -> str:
    """Format a moment as ISO-8601 UTC with millisecond precision."""
    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


@dataclass(frozen=True)
class Snapshot:
    """The latest normalised listing set for the configured query."""

    last_updated: str
    total_listings: int
    listings: list[Listing] = field(
        default_factory=lambda: list[Listing]()
    )

    @classmethod
    def build(
        cls, listings: list[Listing], now: datetime | None = None
    ) -> "Snapshot":
        """Create a snapshot whose count always matches its listings."""
        return cls(
            last_updated=utc_timestamp(now),
            total_listings=len(listings),
            listings=list(listings),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form stored and served verbatim."""
        return {
            "lastUpdated": self.last_updated,
            "totalListings": self.total_listings,
            "listings": [item.to_dict() for item in self.listings],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        """Rebuild a snapshot from its stored wire form.

        Raises:
            ValueError: When the payload is not a snapshot document.
        """
        if not isinstance(data, dict) or not isinstance(
            data.get("listings"), list
        ):
            raise ValueError("payload is not a snapshot document")
        listings = [Listing.from_dict(item) for item in data["listings"]]
        return cls(
            last_updated=str(data.get("lastUpdated", "")),
            total_listings=int(
                data.get("totalListings", len(listings))
            ),
            listings=listings,
        )


class ExplicitEmpty:
    """Marker returned when no snapshot has been written yet."""

    _instance: "ExplicitEmpty | None" = None

    def __new__(cls) -> "ExplicitEmpty":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EXPLICIT_EMPTY"


EXPLICIT_EMPTY = ExplicitEmpty()


@dataclass(frozen=True)
class IngestionResult:
    """Summary of a successful ingestion run."""

    listings_scraped: int
    last_updated: str
    snapshot_location: str
    strategy_id: str
    dropped: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the trigger response body."""
        return {
            "success": True,
            "listingsScraped": self.listings_scraped,
            "lastUpdated": self.last_updated,
            "snapshotUrl": self.snapshot_location,
            # Key read by existing consumers of the trigger response
            "cloudinaryUrl": self.snapshot_location,
            "strategy": self.strategy_id,
        }
