"""
Thin client for the Firecrawl scrape endpoint.

Every call returns a ScrapeOutcome tagged with its kind, so callers can
tell a rate-limit rejection (HTTP 429) from any other failure without
inspecting error text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence

import requests

from config import FIRECRAWL_API_URL, SCRAPE_TIMEOUT

logger = logging.getLogger(__name__)


class ScrapeKind(str, Enum):
    OK = "ok"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass
class ScrapeOutcome:
    """Result of one scrape request."""
    kind: ScrapeKind
    data: Dict[str, Any] = field(default_factory=dict)
    error: str = ""
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.kind is ScrapeKind.OK


class FirecrawlClient:
    """Scrapes pages through the Firecrawl REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = FIRECRAWL_API_URL,
        timeout: float = SCRAPE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def scrape(
        self,
        url: str,
        formats: Sequence[str] = ("markdown",),
        wait_for: int = 0,
        only_main_content: bool = True,
    ) -> ScrapeOutcome:
        """
        Render a page and return its content.

        Args:
            url: Page to scrape.
            formats: Content formats to request ("markdown", "html", ...).
            wait_for: Milliseconds the backend waits for client-side rendering.
            only_main_content: Strip navigation, headers and footers.

        Returns:
            ScrapeOutcome; never raises for HTTP or transport errors.
        """
        payload: Dict[str, Any] = {
            "url": url,
            "formats": list(formats),
            "onlyMainContent": only_main_content,
        }
        if wait_for:
            payload["waitFor"] = wait_for

        logger.info(f"Scraping {url}")
        try:
            response = self._session.post(
                f"{self.base_url}/v1/scrape",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Scrape request for {url} failed: {e}")
            return ScrapeOutcome(kind=ScrapeKind.FAILED, error=str(e))

        if response.status_code == 429:
            logger.warning(f"Scraping backend rate limited the request for {url}")
            return ScrapeOutcome(
                kind=ScrapeKind.RATE_LIMITED,
                error=_error_message(response) or "Rate limit exceeded",
                status_code=429,
            )

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code >= 400 or not body.get("success"):
            error = _error_message(response, body) or f"HTTP {response.status_code}"
            logger.warning(f"Scrape of {url} failed: {error}")
            return ScrapeOutcome(kind=ScrapeKind.FAILED, error=error, status_code=response.status_code)

        data = body.get("data")
        return ScrapeOutcome(
            kind=ScrapeKind.OK,
            data=data if isinstance(data, dict) else {},
            status_code=response.status_code,
        )


def _error_message(response: requests.Response, body: Optional[dict] = None) -> str:
    if body is None:
        try:
            body = response.json()
        except ValueError:
            body = {}
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return ""


def combined_text(data: Dict[str, Any], parts: Sequence[str] = ("content", "markdown", "html")) -> str:
    """Lowercase concatenation of the text formats present in a scrape result."""
    return "\n".join(str(data.get(p) or "") for p in parts).lower()
