"""Tests for address formatting, links and address extraction."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from coverage_finder.address import (
    business_category,
    business_phone,
    city_from_address,
    extract_address,
    format_address,
    maps_link,
    search_link,
)

FULL_TAGS = {
    "addr:street": "Via Roma",
    "addr:housenumber": "1",
    "addr:postcode": "00100",
    "addr:city": "Roma",
}


class TestFormatAddress:
    def test_full_address(self):
        assert format_address(FULL_TAGS) == "Via Roma 1, 00100 Roma"

    def test_no_tags(self):
        assert format_address({}) == ""

    def test_only_city(self):
        assert format_address({"addr:city": "Roma"}) == "Roma"

    def test_street_without_number(self):
        assert format_address({"addr:street": "Via Appia", "addr:city": "Roma"}) == "Via Appia, Roma"

    def test_whitespace_is_collapsed(self):
        tags = {"addr:street": "  Via   del Corso ", "addr:housenumber": " 12 ", "addr:city": "Roma "}
        assert format_address(tags) == "Via del Corso 12, Roma"

    def test_ignores_non_address_tags(self):
        assert format_address({"name": "Hotel", "tourism": "hotel"}) == ""


class TestBusinessInfo:
    def test_tourism_is_lodging(self):
        assert business_category({"tourism": "hotel", "amenity": "bar"}) == {"type": "hotel", "category": "Lodging"}

    def test_shop_is_retail(self):
        assert business_category({"shop": "bakery"})["category"] == "Retail"

    def test_landuse_is_industrial(self):
        assert business_category({"landuse": "industrial"})["category"] == "Industrial"

    def test_unknown(self):
        assert business_category({"name": "X"}) == {"type": "unknown", "category": "Other"}

    def test_contact_phone_preferred(self):
        assert business_phone({"phone": "1", "contact:phone": "2"}) == "2"
        assert business_phone({"phone": "1"}) == "1"
        assert business_phone({}) == ""


class TestLinks:
    def test_search_link_is_encoded(self):
        assert search_link("Bar Roma", "Via Roma 1, 00100 Roma") == (
            "https://www.google.com/search?q=Bar%20Roma%20Via%20Roma%201%2C%2000100%20Roma"
        )

    def test_maps_link_is_encoded(self):
        assert maps_link("Caffè & Co", "") == "https://maps.google.com/?q=Caff%C3%A8%20%26%20Co"


class TestExtractAddress:
    def test_street_number_postcode_city(self):
        content = "Trattoria da Mario\nVia Roma 12, 00184 Roma\n⭐ 4.5 (120)"
        assert extract_address(content) == "Via Roma 12, 00184 Roma"

    def test_longest_match_wins(self):
        content = "Via Po 1, 00198 Roma\n- Viale Europa 190, 00144 Roma\n- fine"
        assert extract_address(content) == "Viale Europa 190, 00144 Roma"

    def test_equal_length_matches_keep_last(self):
        content = "Via Po 1, 00198 Roma\n- Via Po 2, 00198 Roma\n- fine"
        assert extract_address(content) == "Via Po 2, 00198 Roma"

    def test_postcode_and_city_only(self):
        assert extract_address("Sede legale: 20121 Milano") == "20121 Milano"

    def test_line_fallback(self):
        content = "Orari\nLocalità Il Poggio km 12 cap 52026\n09:00-18:00"
        assert extract_address(content) == "Località Il Poggio km 12 cap 52026"

    def test_nothing_found(self):
        assert extract_address("Nessun risultato") == ""
        assert extract_address("") == ""


def test_city_from_address():
    assert city_from_address("Via Roma 12, 00184 Roma") == "Roma"
    assert city_from_address("Corso Como 1, 20121 Milano MI") == "Milano"
    assert city_from_address("Via senza cap") == ""
