"""
Fiber coverage lookup for business addresses.

Scrapes the Open Fiber coverage checker through Firecrawl and classifies
the rendered page as FTTH, FWA or not covered. Lookups are validated,
cached per address and city, and dispatched through the shared rate
limiter. Every public method returns a result object instead of raising.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

from config import (
    ADDRESS_WAIT_FOR_MS,
    COVERAGE_WAIT_FOR_MS,
    CREDENTIAL_TEST_URL,
    GOOGLE_MAPS_PLACE_URL,
    GOOGLE_MAPS_SEARCH_URL,
    OPEN_FIBER_URL,
)
from coverage_finder.address import extract_address
from coverage_finder.credentials import CredentialStore
from coverage_finder.errors import CredentialError
from coverage_finder.models import AddressResult, CoverageResult, CoverageStatus, LookupKind
from coverage_finder.scrape_client import ScrapeKind, ScrapeOutcome, combined_text
from coverage_finder.utils.cache import CoverageCache, make_address_key
from coverage_finder.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Checked in this order; the first group with a hit decides.
FTTH_MARKERS = ("ftth", "fiber to the home", "fibra ottica", "fibra fino a casa")
FWA_MARKERS = ("fwa", "fixed wireless access", "wireless fisso")
NOT_COVERED_MARKERS = ("non coperto", "non disponibile", "not covered")

_ALNUM = re.compile(r"[0-9A-Za-zÀ-ÿ]")


def is_valid_lookup(city: str, address: str) -> bool:
    """Address needs 3+ chars with a letter or digit, city needs 2+ chars."""
    address = (address or "").strip()
    city = (city or "").strip()
    return len(address) >= 3 and bool(_ALNUM.search(address)) and len(city) >= 2


def classify_coverage(text: str) -> CoverageStatus:
    """
    Classify lowercase page text.

    No marker at all means no coverage.
    """
    if any(marker in text for marker in FTTH_MARKERS):
        return CoverageStatus.FTTH
    if any(marker in text for marker in FWA_MARKERS):
        return CoverageStatus.FWA
    if any(marker in text for marker in NOT_COVERED_MARKERS):
        return CoverageStatus.NOT_COVERED
    return CoverageStatus.NOT_COVERED


def coverage_url(city: str, address: str) -> str:
    return f"{OPEN_FIBER_URL}?address={quote(f'{address}, {city}', safe='')}"


class CoverageService:
    """Coverage classification and address lookups over a rate-limited scraper."""

    def __init__(
        self,
        credentials: CredentialStore,
        cache: CoverageCache,
        limiter: RateLimiter,
    ):
        self.credentials = credentials
        self.cache = cache
        self.limiter = limiter

    def _scrape(self, client, url: str, formats, wait_for: int) -> ScrapeOutcome:
        with self.limiter:
            return client.scrape(url, formats=formats, wait_for=wait_for, only_main_content=True)

    def classify(self, city: str, address: str) -> CoverageResult:
        """
        Look up fiber coverage for an address.

        Args:
            city: City name.
            address: Street address (may already contain the city).

        Returns:
            CoverageResult with coverage set when success is True.
        """
        if not self.credentials.get():
            return CoverageResult(success=False, kind=LookupKind.MISSING_CREDENTIAL, error="API key not found")

        if not is_valid_lookup(city, address):
            return CoverageResult(
                success=False,
                kind=LookupKind.INVALID_ADDRESS,
                error=f"Invalid address: {address!r}, {city!r}",
            )

        address, city = address.strip(), city.strip()
        key = make_address_key(address, city)
        cached = self.cache.get(key)
        if cached is not None:
            return CoverageResult(success=True, kind=LookupKind.OK, coverage=cached, cached=True)

        try:
            client = self.credentials.client()
        except CredentialError as e:
            return CoverageResult(success=False, kind=LookupKind.MISSING_CREDENTIAL, error=str(e))

        url = coverage_url(city, address)
        logger.info(f"Checking coverage for {address}, {city}")
        outcome = self._scrape(client, url, ("markdown", "html"), COVERAGE_WAIT_FOR_MS)

        if outcome.kind is ScrapeKind.RATE_LIMITED:
            return CoverageResult(success=False, kind=LookupKind.RATE_LIMITED, error=outcome.error)
        if not outcome.ok:
            return CoverageResult(
                success=False,
                kind=LookupKind.SCRAPE_FAILED,
                error=outcome.error or "Failed to scrape coverage checker",
            )

        text = combined_text(outcome.data)
        if not text.strip():
            logger.warning(f"Scrape of {url} returned no content")
            return CoverageResult(
                success=False,
                kind=LookupKind.EMPTY_CONTENT,
                error="No content received from scraping",
            )

        coverage = classify_coverage(text)
        logger.info(f"Coverage for {address}, {city}: {coverage.value}")
        self.cache.set(key, coverage)
        return CoverageResult(success=True, kind=LookupKind.OK, coverage=coverage)

    def locate_address(self, business_name: str, lat: float, lon: float) -> AddressResult:
        """
        Find a postal address for a business by scraping a map search page.

        Searches by name near the coordinates, falling back to the bare
        coordinate page if the named search fails.
        """
        try:
            client = self.credentials.client()
        except CredentialError as e:
            return AddressResult(success=False, kind=LookupKind.MISSING_CREDENTIAL, error=str(e))

        coord_url = f"{GOOGLE_MAPS_PLACE_URL}{lat},{lon}"
        if business_name:
            search_url = f"{GOOGLE_MAPS_SEARCH_URL}{quote(business_name, safe='')}+{lat},{lon}"
        else:
            search_url = coord_url

        outcome = self._scrape(client, search_url, ("markdown",), ADDRESS_WAIT_FOR_MS)
        if not outcome.ok and search_url != coord_url and outcome.kind is not ScrapeKind.RATE_LIMITED:
            logger.warning(f"Map search for {business_name!r} failed, trying coordinate search")
            outcome = self._scrape(client, coord_url, ("markdown",), ADDRESS_WAIT_FOR_MS)

        if outcome.kind is ScrapeKind.RATE_LIMITED:
            return AddressResult(success=False, kind=LookupKind.RATE_LIMITED, error=outcome.error)
        if not outcome.ok:
            return AddressResult(
                success=False,
                kind=LookupKind.SCRAPE_FAILED,
                error=outcome.error or "Failed to scrape map search",
            )

        content = outcome.data.get("content") or outcome.data.get("markdown") or ""
        address = extract_address(content)
        logger.info(f"Located address for {business_name or (lat, lon)}: {address or '-'}")
        return AddressResult(success=True, kind=LookupKind.OK, address=address)

    def test_credential(self, api_key: str) -> bool:
        """Scrape a known page with a temporary client. Nothing is stored."""
        if not api_key or not api_key.strip():
            return False
        client = self.credentials.new_client(api_key.strip())
        outcome = self._scrape(client, CREDENTIAL_TEST_URL, ("markdown",), 0)
        if not outcome.ok:
            logger.warning(f"API key test failed: {outcome.error}")
        return outcome.ok
