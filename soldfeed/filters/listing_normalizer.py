# soldfeed/filters/listing_normalizer.py

"""Listing normalisation: fill defaults and drop non-records."""

import logging

from soldfeed.config.settings import Settings
from soldfeed.extractors.field_extractors import clean_text, extract_item_id
from soldfeed.models.listing import Listing, RawListing, SourceKind

logger = logging.getLogger("soldfeed.filters")


class ListingNormalizer:
    """Turn raw listing bundles into canonical records.

    Pure: the same input always produces the same output, and the
    upstream order (newest sale first) is kept as-is.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def _drop_reason(self, raw: RawListing, title: str) -> str | None:
        """Return why *raw* is not a real listing, or None to keep it."""
        if not title:
            return "empty title"
        if title in self.settings.PLACEHOLDER_TITLES:
            return "placeholder title"
        # A zero price on a scraped card means the parse missed;
        # the API can legitimately report zero-value listings.
        if raw.source is SourceKind.SCRAPE and (raw.price or "0") == "0":
            return "zero scraped price"
        return None

    def _to_listing(self, raw: RawListing, title: str) -> Listing:
        """Fill defaults for every missing field."""
        default_currency = self.settings.DEFAULT_CURRENCY
        url = raw.listing_url or ""
        return Listing(
            title=title,
            price=raw.price or "0",
            currency=raw.currency or default_currency,
            shipping_cost=raw.shipping_cost or "0",
            shipping_currency=raw.shipping_currency or default_currency,
            seller=clean_text(raw.seller) or self.settings.UNKNOWN_SELLER,
            listing_url=url,
            item_id=raw.item_id or extract_item_id(url),
            sold_date=raw.sold_date or None,
            condition=raw.condition or None,
        )

    def normalize(
        self, raw_listings: list[RawListing]
    ) -> tuple[list[Listing], int]:
        """Normalise raw bundles and drop non-records.

        Returns the canonical listings and the count of dropped items.
        """
        kept: list[Listing] = []
        dropped = 0

        for raw in raw_listings:
            title = clean_text(raw.title)
            reason = self._drop_reason(raw, title)
            if reason:
                logger.debug(
                    "Dropped %s listing (%s): title=%r url=%s",
                    raw.source.value,
                    reason,
                    title,
                    raw.listing_url,
                )
                dropped += 1
                continue
            kept.append(self._to_listing(raw, title))

        if dropped:
            logger.info("Normalisation dropped %d items", dropped)

        return kept, dropped
