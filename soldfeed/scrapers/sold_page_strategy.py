# soldfeed/scrapers/sold_page_strategy.py

"""Fallback acquisition by scraping eBay's rendered sold-results page."""

from datetime import datetime

from bs4 import BeautifulSoup, Tag

from soldfeed.extractors.field_extractors import (
    clean_text,
    extract_currency,
    extract_date,
    extract_item_id,
    extract_price,
    extract_seller,
    extract_shipping,
)
from soldfeed.models.listing import RawListing, SourceKind
from soldfeed.models.snapshot import utc_timestamp
from soldfeed.scrapers.base_strategy import BaseStrategy


class SoldPageStrategy(BaseStrategy):
    """Scrape one sold-results page, one ``li.s-item`` per listing.

    eBay serves degraded or blocked markup to obvious bots, so the
    request goes out with full browser headers on an impersonating
    curl_cffi session.
    """

    strategy_id = "sold_page"

    def _build_params(self, query: str) -> dict[str, str]:
        """Query string for a sold + completed, newest-first page."""
        return {
            "_nkw": query,
            "LH_Sold": "1",
            "LH_Complete": "1",
            "_ipg": str(self.settings.SOLD_PAGE_SIZE),
            "_sop": "13",
        }

    def _text(self, node: Tag, role: str) -> str | None:
        """Text of the sub-node playing *role*, or None if absent."""
        selector = self.selectors.get(role, "")
        if not selector:
            return None
        el = node.select_one(selector)
        if el is None:
            return None
        return clean_text(el.get_text(" ", strip=True)) or None

    def _is_placeholder(self, node: Tag) -> bool:
        """True for the "Shop on eBay" header node eBay puts first."""
        marker = self.selectors.get("placeholder_marker", "")
        classes = node.get("class") or []
        if marker and marker in classes:
            return True
        title = self._text(node, "title")
        return title in self.settings.PLACEHOLDER_TITLES

    def _parse_node(self, node: Tag, acquired_at: str) -> RawListing:
        """Parse a single result node into a raw listing bundle."""
        link = node.select_one(self.selectors.get("link", "a"))
        href = link.get("href") if link else None
        url = str(href).split("?", 1)[0] if href else None
        if url and url.startswith("/"):
            url = f"{self.settings.LISTING_BASE_URL}{url}"

        price_text = self._text(node, "price")
        shipping_text = self._text(node, "shipping")

        return RawListing(
            source=SourceKind.SCRAPE,
            title=self._text(node, "title"),
            price=extract_price(price_text),
            currency=extract_currency(
                price_text, self.settings.DEFAULT_CURRENCY
            ),
            shipping_cost=extract_shipping(shipping_text),
            shipping_currency=extract_currency(
                shipping_text,
                extract_currency(
                    price_text, self.settings.DEFAULT_CURRENCY
                ),
            ),
            seller=extract_seller(
                self._text(node, "seller"),
                self.settings.UNKNOWN_SELLER,
            ),
            listing_url=url,
            item_id=extract_item_id(url),
            # Scraped items without a date are stamped with fetch time
            sold_date=extract_date(
                [
                    self._text(node, "ended_date"),
                    self._text(node, "tag_date"),
                    self._text(node, "status_date"),
                ],
                acquired_at,
            ),
            condition=self._text(node, "condition"),
        )

    def acquire(self, query: str) -> list[RawListing]:
        """Fetch and parse the sold-results page for *query*."""
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "User-Agent": self.settings.USER_AGENT,
            "Referer": f"{self.settings.LISTING_BASE_URL}/",
        }
        self.logger.info("[sold_page] Fetching sold results for '%s'", query)
        resp = self._fetch_get(
            self.settings.SOLD_PAGE_URL,
            params=self._build_params(query),
            headers=headers,
        )
        acquired_at = utc_timestamp(datetime.now().astimezone())

        soup = BeautifulSoup(resp.text, "lxml")
        nodes = soup.select(self.selectors["result_node"])

        listings: list[RawListing] = []
        skipped = 0
        for node in nodes:
            if self._is_placeholder(node):
                skipped += 1
                continue
            try:
                listings.append(self._parse_node(node, acquired_at))
            except Exception as exc:
                skipped += 1
                self.logger.warning(
                    "[sold_page] Dropping unparsable result node: %s",
                    exc,
                    exc_info=True,
                )

        self.logger.info(
            "[sold_page] Parsed %d of %d result nodes for '%s'",
            len(listings),
            len(nodes),
            query,
        )
        if not nodes:
            self.logger.warning(
                "[sold_page] No result nodes found; markup may have changed"
            )
        elif skipped:
            self.logger.debug("[sold_page] Skipped %d nodes", skipped)
        return listings
