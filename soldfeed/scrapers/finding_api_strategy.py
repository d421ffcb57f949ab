# soldfeed/scrapers/finding_api_strategy.py

"""Structured acquisition via the eBay Finding API (findCompletedItems)."""

import json
from typing import Any

from soldfeed.extractors.field_extractors import (
    amount_from_node,
    clean_text,
    extract_date,
    extract_item_id,
)
from soldfeed.models.errors import AcquisitionError, AcquisitionErrorKind
from soldfeed.models.listing import RawListing, SourceKind
from soldfeed.scrapers.base_strategy import BaseStrategy


def _first(node: Any, *path: str) -> Any:
    """Walk the Finding API's list-wrapped JSON.

    Every value in the envelope is a one-element list, so
    ``_first(item, "sellerInfo", "sellerUserName")`` reads
    ``item["sellerInfo"][0]["sellerUserName"][0]``. Returns ``None``
    on any missing step.
    """
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
        if isinstance(node, list):
            node = node[0] if node else None
    return node


class FindingApiStrategy(BaseStrategy):
    """Fetch sold items from the Finding API's completed-items search."""

    strategy_id = "finding_api"

    def _build_params(self, query: str) -> dict[str, str]:
        """Fixed request parameters for a sold-only, newest-first search."""
        page_size = min(
            self.settings.FINDING_API_PAGE_SIZE,
            self.settings.FINDING_API_MAX_PAGE_SIZE,
        )
        return {
            "OPERATION-NAME": "findCompletedItems",
            "SERVICE-VERSION": "1.0.0",
            "SECURITY-APPNAME": self.settings.EBAY_APP_ID,
            "RESPONSE-DATA-FORMAT": "JSON",
            "REST-PAYLOAD": "",
            "keywords": query,
            "paginationInput.entriesPerPage": str(page_size),
            "itemFilter(0).name": "SoldItemsOnly",
            "itemFilter(0).value": "true",
            "sortOrder": "EndTimeSoonest",
        }

    @staticmethod
    def _parse_item(item: dict[str, Any]) -> RawListing:
        """Map one Finding API item into a raw listing bundle."""
        price, currency = amount_from_node(
            _first(item, "sellingStatus", "currentPrice")
        )
        shipping, shipping_currency = amount_from_node(
            _first(item, "shippingInfo", "shippingServiceCost")
        )
        url = _first(item, "viewItemURL")
        item_id = _first(item, "itemId")
        condition = _first(item, "condition", "conditionDisplayName")
        title = _first(item, "title")
        seller = _first(item, "sellerInfo", "sellerUserName")

        return RawListing(
            source=SourceKind.STRUCTURED,
            title=clean_text(str(title)) if title else None,
            price=price,
            currency=currency,
            shipping_cost=shipping,
            shipping_currency=shipping_currency,
            seller=str(seller) if seller else None,
            listing_url=str(url) if url else None,
            item_id=str(item_id) if item_id else extract_item_id(url),
            # The structured path never invents a date
            sold_date=extract_date(
                [_first(item, "listingInfo", "endTime")], None
            ),
            condition=str(condition) if condition else None,
        )

    def _unwrap_items(self, data: Any) -> list[Any]:
        """Validate the envelope and return its item list."""
        if not isinstance(data, dict):
            raise AcquisitionError(
                AcquisitionErrorKind.UPSTREAM_REJECTED,
                "Finding API response is not an object",
            )
        envelope = _first(data, "findCompletedItemsResponse")
        if not isinstance(envelope, dict):
            raise AcquisitionError(
                AcquisitionErrorKind.UPSTREAM_REJECTED,
                "Finding API response envelope missing",
            )
        ack = _first(envelope, "ack")
        if ack != "Success":
            message = _first(
                envelope, "errorMessage", "error", "message"
            )
            raise AcquisitionError(
                AcquisitionErrorKind.UPSTREAM_REJECTED,
                f"Finding API ack={ack!r}: {message or 'request failed'}",
            )
        items = _first(envelope, "searchResult")
        if not isinstance(items, dict):
            return []
        raw_items = items.get("item", [])
        if not isinstance(raw_items, list):
            raise AcquisitionError(
                AcquisitionErrorKind.UPSTREAM_REJECTED,
                "Finding API searchResult.item is not a list",
            )
        return raw_items

    def acquire(self, query: str) -> list[RawListing]:
        """Run one completed-items search and map every item."""
        if not self.settings.EBAY_APP_ID:
            raise AcquisitionError(
                AcquisitionErrorKind.UPSTREAM_REJECTED,
                "EBAY_APP_ID is not configured",
            )

        self.logger.info(
            "[finding_api] Searching completed items for '%s'", query
        )
        resp = self._fetch_get(
            self.settings.FINDING_API_URL,
            params=self._build_params(query),
            headers={"Accept": "application/json"},
        )
        try:
            data: Any = json.loads(resp.text)
        except ValueError as exc:
            raise AcquisitionError(
                AcquisitionErrorKind.TRANSPORT,
                f"Finding API body is not JSON: {exc}",
            ) from exc

        raw_items = self._unwrap_items(data)
        listings: list[RawListing] = []
        for item in raw_items:
            if not isinstance(item, dict):
                self.logger.debug(
                    "[finding_api] Skipping non-object item: %r", item
                )
                continue
            try:
                listings.append(self._parse_item(item))
            except Exception as exc:
                self.logger.warning(
                    "[finding_api] Dropping unparsable item: %s",
                    exc,
                    exc_info=True,
                )

        self.logger.info(
            "[finding_api] Parsed %d of %d items for '%s'",
            len(listings),
            len(raw_items),
            query,
        )
        return listings
