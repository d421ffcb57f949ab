# tests/test_field_extractors.py

"""Tests for the pure field extractors."""

import unittest

from soldfeed.extractors.field_extractors import (
    amount_from_node,
    clean_text,
    extract_currency,
    extract_date,
    extract_item_id,
    extract_price,
    extract_seller,
    extract_shipping,
)


class TestExtractPrice(unittest.TestCase):
    """Two-decimal price extraction from free text."""

    def test_thousands_separated_price(self) -> None:
        self.assertEqual(extract_price("$1,234.56 each"), "1234.56")

    def test_plain_price(self) -> None:
        self.assertEqual(extract_price("US $64.99"), "64.99")

    def test_large_unseparated_price(self) -> None:
        self.assertEqual(extract_price("12345.67"), "12345.67")

    def test_range_takes_first_amount(self) -> None:
        self.assertEqual(extract_price("$10.00 to $20.00"), "10.00")

    def test_no_two_digit_decimal_is_zero(self) -> None:
        """Whole numbers and words do not count as prices."""
        self.assertEqual(extract_price("$15"), "0")
        self.assertEqual(extract_price("See price"), "0")

    def test_missing_text_is_zero(self) -> None:
        self.assertEqual(extract_price(None), "0")
        self.assertEqual(extract_price(""), "0")


class TestExtractCurrency(unittest.TestCase):
    """Currency inference with a fixed fallback."""

    def test_symbols(self) -> None:
        self.assertEqual(extract_currency("£18.50"), "GBP")
        self.assertEqual(extract_currency("€9.99"), "EUR")

    def test_prefixed_dollar_variants(self) -> None:
        self.assertEqual(extract_currency("AU $30.00"), "AUD")
        self.assertEqual(extract_currency("C $30.00"), "CAD")

    def test_explicit_iso_code(self) -> None:
        self.assertEqual(extract_currency("GBP 12.00"), "GBP")

    def test_unknown_uses_default(self) -> None:
        self.assertEqual(extract_currency("$5.00"), "USD")
        self.assertEqual(extract_currency(None, "EUR"), "EUR")

    def test_unrecognised_uppercase_word_ignored(self) -> None:
        self.assertEqual(extract_currency("NEW $5.00"), "USD")


class TestAmountFromNode(unittest.TestCase):
    """Pre-typed Finding API amounts."""

    def test_list_wrapped_amount(self) -> None:
        node = [{"@currencyId": "GBP", "__value__": "22.0"}]
        self.assertEqual(amount_from_node(node), ("22.0", "GBP"))

    def test_bare_dict_amount(self) -> None:
        node = {"@currencyId": "USD", "__value__": 5}
        self.assertEqual(amount_from_node(node), ("5", "USD"))

    def test_missing_parts(self) -> None:
        self.assertEqual(amount_from_node(None), (None, None))
        self.assertEqual(amount_from_node([]), (None, None))
        self.assertEqual(
            amount_from_node({"__value__": "1.0"}), ("1.0", None)
        )


class TestExtractShipping(unittest.TestCase):
    """Shipping cost extraction."""

    def test_free_shipping(self) -> None:
        self.assertEqual(extract_shipping("Free shipping"), "0")
        self.assertEqual(extract_shipping("FREE delivery"), "0")

    def test_priced_shipping(self) -> None:
        self.assertEqual(extract_shipping("+ $5.00 shipping"), "5.00")

    def test_unparsable_shipping(self) -> None:
        self.assertEqual(extract_shipping("Shipping not specified"), "0")
        self.assertEqual(extract_shipping(None), "0")


class TestExtractDate(unittest.TestCase):
    """Priority-ordered date candidates."""

    def test_first_non_empty_wins(self) -> None:
        result = extract_date(
            [None, "  ", "Sold Oct 16, 2026", "Ended Oct 1, 2026"],
            "fallback",
        )
        self.assertEqual(result, "Oct 16, 2026")

    def test_end_time_kept_verbatim(self) -> None:
        result = extract_date(["2026-10-18T19:22:05.000Z"], None)
        self.assertEqual(result, "2026-10-18T19:22:05.000Z")

    def test_non_string_candidates_skipped(self) -> None:
        """Numeric or nested end-time values never raise."""
        self.assertIsNone(extract_date([123, ["x"], {"a": 1}], None))
        self.assertEqual(
            extract_date([1729000000, "Sold Oct 2, 2026"], None),
            "Oct 2, 2026",
        )

    def test_fallback_when_no_candidates(self) -> None:
        self.assertIsNone(extract_date([None, ""], None))
        self.assertEqual(
            extract_date([], "2026-10-19T00:00:00.000Z"),
            "2026-10-19T00:00:00.000Z",
        )


class TestExtractItemId(unittest.TestCase):
    """Item id from listing URLs."""

    def test_plain_item_url(self) -> None:
        self.assertEqual(
            extract_item_id("https://www.ebay.com/itm/286012345678"),
            "286012345678",
        )

    def test_slugged_item_url_with_query(self) -> None:
        url = "https://www.ebay.com/itm/Some-Slug/166700002222?hash=x"
        self.assertEqual(extract_item_id(url), "166700002222")

    def test_non_item_url(self) -> None:
        self.assertEqual(extract_item_id("https://www.ebay.com/sch/i.html"), "")
        self.assertEqual(extract_item_id(None), "")

    def test_non_string_url(self) -> None:
        """A bare number from the JSON payload yields no id."""
        self.assertEqual(extract_item_id(123), "")
        self.assertEqual(extract_item_id(["/itm/1"]), "")


class TestExtractSeller(unittest.TestCase):
    """Seller label stripping."""

    def test_label_and_feedback_stripped(self) -> None:
        self.assertEqual(
            extract_seller("Seller: recordcrate (2,341) 99.6%"),
            "recordcrate",
        )

    def test_plain_name_untouched(self) -> None:
        self.assertEqual(extract_seller("seller_shop"), "seller_shop")

    def test_empty_uses_default(self) -> None:
        self.assertEqual(extract_seller(None), "Unknown")
        self.assertEqual(extract_seller("Seller:", "n/a"), "n/a")


class TestCleanText(unittest.TestCase):
    """Whitespace collapsing."""

    def test_collapses_whitespace(self) -> None:
        self.assertEqual(clean_text("  a \n\t b  "), "a b")
        self.assertEqual(clean_text(None), "")

    def test_non_string_is_empty(self) -> None:
        """Non-string values count as missing text."""
        self.assertEqual(clean_text(42), "")
        self.assertEqual(extract_price(12.5), "0")
        self.assertEqual(extract_shipping(0), "0")
        self.assertEqual(extract_currency(7, "GBP"), "GBP")
        self.assertEqual(extract_seller(99), "Unknown")


if __name__ == "__main__":
    unittest.main()
