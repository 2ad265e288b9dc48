"""Shared fakes for coverage finder tests."""

import sys
from pathlib import Path
from typing import List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from coverage_finder.credentials import CredentialStore, MemoryStorage
from coverage_finder.coverage_service import CoverageService
from coverage_finder.scrape_client import ScrapeKind, ScrapeOutcome
from coverage_finder.utils.cache import CoverageCache
from coverage_finder.utils.rate_limiter import RateLimiter


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeScrapeClient:
    """Records scrape calls and replays queued outcomes."""

    def __init__(self, clock: Optional[FakeClock] = None, default: Optional[ScrapeOutcome] = None):
        self.clock = clock
        self.calls: List[dict] = []
        self.outcomes: List[ScrapeOutcome] = []
        self.default = default or ok_outcome(markdown="Indirizzo coperto in FTTH")

    def scrape(self, url, formats=("markdown",), wait_for=0, only_main_content=True):
        self.calls.append({
            "url": url,
            "formats": tuple(formats),
            "wait_for": wait_for,
            "only_main_content": only_main_content,
            "dispatched_at": self.clock() if self.clock else None,
        })
        if self.outcomes:
            return self.outcomes.pop(0)
        return self.default


def ok_outcome(content: str = "", markdown: str = "", html: str = "") -> ScrapeOutcome:
    data = {"markdown": markdown, "html": html, "metadata": {}}
    if content:
        data["content"] = content
    return ScrapeOutcome(kind=ScrapeKind.OK, data=data, status_code=200)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(2.0, name="test", clock=clock, sleep=clock.sleep)


@pytest.fixture
def scrape_client(clock):
    return FakeScrapeClient(clock)


@pytest.fixture
def storage():
    return MemoryStorage({"firecrawl_api_key": "fc-test"})


@pytest.fixture
def credentials(storage, scrape_client):
    return CredentialStore(storage, client_factory=lambda key: scrape_client)


@pytest.fixture
def service(credentials, limiter):
    return CoverageService(credentials=credentials, cache=CoverageCache(), limiter=limiter)
