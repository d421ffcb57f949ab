# soldfeed/extractors/field_extractors.py

"""Field-level extractors shared by both acquisition strategies.

Every function here is total: it accepts ``None`` or malformed input
and returns a defined default instead of raising, so a single odd
upstream item can never fail an ingestion run.
"""

import re
from collections.abc import Iterable
from typing import Any

# Two fractional digits, optionally thousands-separated ("1,234.56").
_PRICE_RE = re.compile(r"\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2}")

_FREE_RE = re.compile(r"\bfree\b", re.IGNORECASE)

_ITEM_ID_RE = re.compile(r"/itm/(?:[^/?#]+/)?(\d+)")

_SELLER_LABEL_RE = re.compile(r"^\s*seller\s*:\s*", re.IGNORECASE)
# "name (1,234) 99.8%" -> "name"
_SELLER_FEEDBACK_RE = re.compile(r"\s*\([\d,.]+[kKmM]?\).*$")

_DATE_LABEL_RE = re.compile(r"^\s*(?:sold|ended)\s*:?\s*", re.IGNORECASE)

# Prefixes checked before bare symbols ("AU $" must win over "$").
_CURRENCY_PREFIXES: list[tuple[str, str]] = [
    ("AU $", "AUD"),
    ("C $", "CAD"),
    ("US $", "USD"),
    ("£", "GBP"),
    ("€", "EUR"),
]
_ISO_CODES: frozenset[str] = frozenset(
    {"USD", "GBP", "EUR", "AUD", "CAD", "JPY", "CHF", "NZD", "MXN"}
)
_ISO_RE = re.compile(r"\b([A-Z]{3})\b")


def clean_text(text: Any) -> str:
    """Collapse runs of whitespace and strip the ends.

    Anything that is not a string (a bare number from a JSON payload,
    a nested list) counts as missing.
    """
    if not isinstance(text, str) or not text:
        return ""
    return " ".join(text.split())


def extract_price(text: Any) -> str:
    """Extract a plain numeric price string from free text.

    ``"$1,234.56 each"`` becomes ``"1234.56"``. Text without a
    two-decimal amount yields ``"0"``.
    """
    if not isinstance(text, str) or not text:
        return "0"
    match = _PRICE_RE.search(text)
    if not match:
        return "0"
    return match.group(0).replace(",", "")


def extract_currency(text: Any, default: str = "USD") -> str:
    """Infer a currency code from price text, or return *default*."""
    if not isinstance(text, str) or not text:
        return default
    for code in _ISO_RE.findall(text):
        if code in _ISO_CODES:
            return code
    for prefix, code in _CURRENCY_PREFIXES:
        if prefix in text:
            return code
    return default


def amount_from_node(node: Any) -> tuple[str | None, str | None]:
    """Read a pre-typed amount from a Finding API node.

    The API wraps amounts as ``[{"@currencyId": "USD", "__value__":
    "12.5"}]``; a bare dict is accepted too. Returns ``(value,
    currency)`` with ``None`` for whatever is missing.
    """
    if isinstance(node, list):
        node = node[0] if node else None
    if not isinstance(node, dict):
        return None, None
    value = node.get("__value__")
    currency = node.get("@currencyId")
    return (
        str(value) if value not in (None, "") else None,
        str(currency) if currency else None,
    )


def extract_shipping(text: Any) -> str:
    """Extract a shipping cost; free or unparsable shipping is ``"0"``."""
    if not isinstance(text, str) or not text:
        return "0"
    if _FREE_RE.search(text):
        return "0"
    return extract_price(text)


def extract_date(
    candidates: Iterable[Any], fallback: str | None
) -> str | None:
    """Return the first non-empty date candidate, else *fallback*.

    Candidates are given in priority order: explicit end-time field,
    tag text, then status text. A leading ``Sold``/``Ended`` label is
    stripped from text candidates.
    """
    for candidate in candidates:
        text = clean_text(candidate)
        if not text:
            continue
        stripped = _DATE_LABEL_RE.sub("", text)
        if stripped:
            return stripped
    return fallback


def extract_item_id(url: Any) -> str:
    """Pull the numeric item id out of an ``/itm/`` listing URL."""
    if not isinstance(url, str) or not url:
        return ""
    match = _ITEM_ID_RE.search(url)
    return match.group(1) if match else ""


def extract_seller(text: Any, default: str = "Unknown") -> str:
    """Strip the seller label and feedback suffix from seller text."""
    cleaned = clean_text(text)
    if not cleaned:
        return default
    cleaned = _SELLER_LABEL_RE.sub("", cleaned)
    cleaned = _SELLER_FEEDBACK_RE.sub("", cleaned).strip()
    return cleaned or default
