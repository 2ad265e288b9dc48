"""
Enrich search results with fiber coverage, one business at a time.

An EnrichmentRun walks the business list in order and yields an update
every time a record's coverage status changes, so the page can redraw
after each step. Lookups are strictly sequential because the scraping
backend is rate limited globally. A run can be iterated once and can be
cancelled from another search.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional

from config import ENRICHMENT_PAUSE_S
from coverage_finder.address import format_address
from coverage_finder.coverage_service import CoverageService, is_valid_lookup
from coverage_finder.models import BusinessRecord, CoverageResult, CoverageStatus, LookupKind

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class EnrichmentUpdate:
    """One status change of one business."""
    index: int
    business: BusinessRecord
    status: Optional[CoverageStatus]
    businesses: List[BusinessRecord]
    result: Optional[CoverageResult] = None


@dataclass
class EnrichmentSummary:
    total: int = 0
    checked: int = 0
    classified: int = 0
    skipped: int = 0
    errors: int = 0
    rate_limited: int = 0


def _hit_network(result: CoverageResult) -> bool:
    return not result.cached and result.kind not in (
        LookupKind.MISSING_CREDENTIAL,
        LookupKind.INVALID_ADDRESS,
    )


class EnrichmentRun:
    """Sequential coverage enrichment of a result list."""

    def __init__(
        self,
        businesses: List[BusinessRecord],
        service: CoverageService,
        pause_seconds: float = ENRICHMENT_PAUSE_S,
        sleep: Optional[Callable[[float], object]] = None,
    ):
        """
        Args:
            businesses: Records to annotate in place.
            service: Coverage lookup service.
            pause_seconds: Extra pause before a lookup that follows a network lookup,
                on top of the rate limiter.
            sleep: Pause function. Defaults to a wait that cancel() interrupts.
        """
        self.businesses = businesses
        self.service = service
        self.pause_seconds = pause_seconds
        self.state = RunState.IDLE
        self.summary = EnrichmentSummary(total=len(businesses))
        self._cancelled = threading.Event()
        self._sleep = sleep or self._cancelled.wait
        self._iterator: Optional[Iterator[EnrichmentUpdate]] = None

    def __iter__(self) -> Iterator[EnrichmentUpdate]:
        if self._iterator is not None:
            raise RuntimeError("An enrichment run can only be iterated once")
        self._iterator = self._run()
        return self._iterator

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop before the next business. A lookup already in flight finishes."""
        self._cancelled.set()
        if self.state is RunState.IDLE:
            self.state = RunState.CANCELLED
        logger.info("Enrichment run cancelled")

    def run_to_completion(self) -> EnrichmentSummary:
        for _ in self:
            pass
        return self.summary

    def _update(self, index: int, business: BusinessRecord, result: Optional[CoverageResult] = None) -> EnrichmentUpdate:
        return EnrichmentUpdate(
            index=index,
            business=business,
            status=business.coverage_status,
            businesses=self.businesses,
            result=result,
        )

    def _apply(self, business: BusinessRecord, result: CoverageResult) -> None:
        if result.success:
            business.coverage_status = result.coverage
            business.coverage_error = None
            if result.coverage is not None and result.coverage.is_definitive:
                self.summary.classified += 1
        elif result.kind in (LookupKind.MISSING_CREDENTIAL, LookupKind.INVALID_ADDRESS):
            business.coverage_status = None
            business.coverage_error = None
        else:
            business.coverage_status = CoverageStatus.ERROR
            business.coverage_error = result.error
            self.summary.errors += 1
            if result.kind is LookupKind.RATE_LIMITED:
                self.summary.rate_limited += 1

    def _run(self) -> Iterator[EnrichmentUpdate]:
        if self.state is RunState.CANCELLED:
            return
        self.state = RunState.RUNNING
        logger.info(f"Checking coverage for {len(self.businesses)} businesses")

        pause_pending = False
        in_flight: Optional[BusinessRecord] = None
        try:
            for index, business in enumerate(self.businesses):
                if self.cancelled:
                    self.state = RunState.CANCELLED
                    return

                address = format_address(business.tags)
                city = business.city
                if not is_valid_lookup(city, address):
                    logger.debug(f"Skipping business {business.id}: incomplete address")
                    self.summary.skipped += 1
                    continue

                if pause_pending and self.pause_seconds > 0:
                    self._sleep(self.pause_seconds)
                    if self.cancelled:
                        self.state = RunState.CANCELLED
                        return

                business.coverage_status = CoverageStatus.CHECKING
                business.coverage_error = None
                in_flight = business
                yield self._update(index, business)

                try:
                    result = self.service.classify(city, address)
                except Exception:
                    logger.exception(f"Coverage check for business {business.id} failed")
                    result = CoverageResult(
                        success=False,
                        kind=LookupKind.SCRAPE_FAILED,
                        error="Unexpected error during coverage check",
                    )
                in_flight = None
                pause_pending = _hit_network(result)
                self.summary.checked += 1
                self._apply(business, result)
                yield self._update(index, business, result)

            self.state = RunState.COMPLETED
            logger.info(
                f"Coverage check finished: {self.summary.classified}/{self.summary.total} classified, "
                f"{self.summary.skipped} skipped, {self.summary.errors} errors"
            )
        finally:
            if in_flight is not None and in_flight.coverage_status is CoverageStatus.CHECKING:
                in_flight.coverage_status = None
            if self.state is RunState.RUNNING:
                self.state = RunState.CANCELLED
