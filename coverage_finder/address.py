"""
Postal addresses and outbound links for OSM businesses.

Also holds the Italian street-address matchers used to pull an address
out of a scraped map search page.
"""

from __future__ import annotations

import re
from typing import Dict, Mapping
from urllib.parse import quote, urlencode

from config import GOOGLE_MAPS_LINK_URL, GOOGLE_SEARCH_URL

_WHITESPACE = re.compile(r"\s+")

STREET_TYPES = r"(?:Via|Viale|Piazza|Corso|Largo|Vicolo|Strada)"

# Tried in order; the first pattern with any match wins.
ADDRESS_PATTERNS = [
    # Via Roma 12, 00100 Roma
    re.compile(STREET_TYPES + r"\s+[^,\n]+,?\s*\d+[A-Za-z]?,?\s*\d{5}\s+[A-Z][a-zA-ZÀ-ÿ\s]+", re.IGNORECASE),
    # 12 Via Roma, 00100 Roma
    re.compile(r"\d+[A-Za-z]?\s+" + STREET_TYPES + r"\s+[^,\n]+,?\s*\d{5}\s+[A-Z][a-zA-ZÀ-ÿ\s]+", re.IGNORECASE),
    # Via Roma, 00100 Roma RM
    re.compile(STREET_TYPES + r"[^,\n]+,\s*\d{5}[^,\n]+", re.IGNORECASE),
    # 00100 Roma, RM
    re.compile(r"\d{5}\s+[A-Z][a-zA-ZÀ-ÿ\s]+(?:,\s*[A-Z]{2})?"),
]
_HOUSE_NUMBER_AND_POSTCODE = re.compile(r"\d+[A-Za-z]?.*\d{5}")

BUSINESS_CATEGORIES = [
    ("tourism", "Lodging"),
    ("amenity", "Service"),
    ("shop", "Retail"),
    ("office", "Office"),
    ("landuse", "Industrial"),
]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def format_address(tags: Mapping[str, str]) -> str:
    """
    Build a postal address from OSM addr:* tags.

    >>> format_address({"addr:street": "Via Roma", "addr:housenumber": "1",
    ...                 "addr:postcode": "00100", "addr:city": "Roma"})
    'Via Roma 1, 00100 Roma'

    Returns:
        The address, or an empty string when no address tag is present.
    """
    tags = tags or {}
    street_line = collapse_whitespace(
        f"{tags.get('addr:street', '')} {tags.get('addr:housenumber', '')}"
    )
    locality_line = collapse_whitespace(
        f"{tags.get('addr:postcode', '')} {tags.get('addr:city', '')}"
    )
    return ", ".join(part for part in (street_line, locality_line) if part)


def business_category(tags: Mapping[str, str]) -> Dict[str, str]:
    """Return {'type': tag value, 'category': label} from the first category tag found."""
    for key, label in BUSINESS_CATEGORIES:
        if tags.get(key):
            return {"type": tags[key], "category": label}
    return {"type": "unknown", "category": "Other"}


def business_phone(tags: Mapping[str, str]) -> str:
    return tags.get("contact:phone") or tags.get("phone") or ""


def search_link(name: str, address: str) -> str:
    """Web search deep link for a business."""
    return f"{GOOGLE_SEARCH_URL}?{urlencode({'q': f'{name} {address}'.strip()}, quote_via=quote)}"


def maps_link(name: str, address: str) -> str:
    """Map search deep link for a business."""
    return f"{GOOGLE_MAPS_LINK_URL}?{urlencode({'q': f'{name} {address}'.strip()}, quote_via=quote)}"


def extract_address(content: str) -> str:
    """
    Find an Italian street address in free text.

    Returns the longest match of the first pattern that matches anything,
    then falls back to the first short line holding a house number and a
    postcode. Returns an empty string when nothing looks like an address.
    """
    if not content:
        return ""

    for pattern in ADDRESS_PATTERNS:
        matches = pattern.findall(content)
        if matches:
            # Last of the longest matches
            best = max(reversed(matches), key=len)
            return collapse_whitespace(best)

    for line in content.split("\n"):
        if _HOUSE_NUMBER_AND_POSTCODE.search(line) and 10 < len(line) < 100:
            return collapse_whitespace(line)

    return ""


_POSTCODE_CITY = re.compile(r"\b\d{5}\s+([^\d,\n]+)")


def city_from_address(address: str) -> str:
    """City following the postcode in an Italian address, or ''."""
    match = _POSTCODE_CITY.search(address or "")
    if not match:
        return ""
    city = collapse_whitespace(match.group(1))
    # Drop a trailing province code such as "RM"
    return re.sub(r"\s+[A-Z]{2}$", "", city)
