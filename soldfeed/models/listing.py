# soldfeed/models/listing.py

"""Listing data models: the raw per-source bundle and the canonical record."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SourceKind(str, Enum):
    """Which acquisition strategy produced a raw listing."""

    STRUCTURED = "structured"
    SCRAPE = "scrape"


@dataclass
class RawListing:
    """Field bundle for one upstream item after the extractors ran.

    Every field is optional; ``source`` is the tag the normaliser
    uses to apply per-strategy rules.
    """

    source: SourceKind
    title: str | None = None
    price: str | None = None
    currency: str | None = None
    shipping_cost: str | None = None
    shipping_currency: str | None = None
    seller: str | None = None
    listing_url: str | None = None
    item_id: str | None = None
    sold_date: str | None = None
    condition: str | None = None


@dataclass(frozen=True)
class Listing:
    """Canonical, schema-stable record for one sold listing."""

    title: str
    price: str
    currency: str
    shipping_cost: str
    shipping_currency: str
    seller: str
    listing_url: str = ""
    item_id: str = ""
    sold_date: str | None = None
    condition: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase wire form.

        ``condition`` is left out entirely when the source did not
        expose one.
        """
        data: dict[str, Any] = {
            "soldDate": self.sold_date,
            "title": self.title,
            "price": self.price,
            "currency": self.currency,
            "shippingCost": self.shipping_cost,
            "shippingCurrency": self.shipping_currency,
            "seller": self.seller,
            "listingUrl": self.listing_url,
            "itemId": self.item_id,
        }
        if self.condition is not None:
            data["condition"] = self.condition
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Listing":
        """Build a Listing from its wire form."""
        return cls(
            title=str(data["title"]),
            price=str(data.get("price", "0")),
            currency=str(data.get("currency", "")),
            shipping_cost=str(data.get("shippingCost", "0")),
            shipping_currency=str(data.get("shippingCurrency", "")),
            seller=str(data.get("seller", "")),
            listing_url=str(data.get("listingUrl", "")),
            item_id=str(data.get("itemId", "")),
            sold_date=data.get("soldDate"),
            condition=data.get("condition"),
        )
