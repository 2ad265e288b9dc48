"""Tests for the shared scrape rate limiter."""

import sys
import threading
import time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from coverage_finder.utils.rate_limiter import RateLimiter


def dispatch(limiter, clock):
    with limiter:
        return clock()


def test_first_dispatch_does_not_wait(limiter, clock):
    dispatch(limiter, clock)
    assert clock.sleeps == []


def test_second_dispatch_waits_out_interval(limiter, clock):
    first = dispatch(limiter, clock)
    second = dispatch(limiter, clock)

    assert clock.sleeps == [pytest.approx(2.0)]
    assert second - first >= 2.0


def test_partial_wait(limiter, clock):
    dispatch(limiter, clock)
    clock.now += 0.5

    dispatch(limiter, clock)

    assert clock.sleeps == [pytest.approx(1.5)]


def test_no_wait_after_interval_elapsed(limiter, clock):
    dispatch(limiter, clock)
    clock.now += 5.0

    dispatch(limiter, clock)

    assert clock.sleeps == []


def test_lock_released_when_wait_fails(clock):
    def broken_sleep(seconds):
        raise KeyboardInterrupt

    limiter = RateLimiter(2.0, clock=clock, sleep=broken_sleep)
    with limiter:
        pass

    with pytest.raises(KeyboardInterrupt):
        with limiter:
            pass

    # Lock must be free again
    clock.now += 10
    with limiter:
        pass


def test_concurrent_requests_never_overlap():
    limiter = RateLimiter(0.05, name="threads")
    spans = []
    spans_lock = threading.Lock()

    def request():
        with limiter:
            start = time.monotonic()
            time.sleep(0.01)
            end = time.monotonic()
        with spans_lock:
            spans.append((start, end))

    threads = [threading.Thread(target=request) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    spans.sort()
    assert len(spans) == 4
    for (prev_start, prev_end), (start, _) in zip(spans, spans[1:]):
        assert start >= prev_end
        assert start - prev_start >= 0.05 - 1e-3
