"""Unit tests for the sliding-window rate limiter."""

import pytest

from pharmagenie.domain.exceptions import RateLimitExceededError
from pharmagenie.infrastructure.rate_limit import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limiter(clock: FakeClock, max_requests: int = 3) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(max_requests=max_requests, window_seconds=60, clock=clock)


def test_remaining_counts_down():
    limiter = _limiter(FakeClock())
    assert [limiter.hit("a") for _ in range(3)] == [2, 1, 0]


def test_over_budget_raises_with_retry_after():
    clock = FakeClock()
    limiter = _limiter(clock)
    for _ in range(3):
        limiter.hit("a")
        clock.now += 10

    with pytest.raises(RateLimitExceededError) as exc_info:
        limiter.hit("a")
    # Oldest request was 30s ago, so it leaves the window in 30s.
    assert exc_info.value.retry_after == 30
    assert exc_info.value.limit == 3
    assert exc_info.value.client_id == "a"


def test_window_slides():
    clock = FakeClock()
    limiter = _limiter(clock, max_requests=2)
    limiter.hit("a")
    clock.now += 30
    limiter.hit("a")
    clock.now += 31
    # The first request has left the window.
    assert limiter.hit("a") == 0


def test_rejected_requests_do_not_consume_budget():
    clock = FakeClock()
    limiter = _limiter(clock, max_requests=1)
    limiter.hit("a")
    for _ in range(5):
        with pytest.raises(RateLimitExceededError):
            limiter.hit("a")
    clock.now += 61
    assert limiter.hit("a") == 0


def test_clients_are_independent():
    limiter = _limiter(FakeClock(), max_requests=1)
    limiter.hit("a")
    assert limiter.hit("b") == 0


def test_retry_after_is_at_least_one_second():
    clock = FakeClock()
    limiter = _limiter(clock, max_requests=1)
    limiter.hit("a")
    clock.now += 59.9
    with pytest.raises(RateLimitExceededError) as exc_info:
        limiter.hit("a")
    assert exc_info.value.retry_after == 1


def test_reset():
    limiter = _limiter(FakeClock(), max_requests=1)
    limiter.hit("a")
    limiter.hit("b")
    limiter.reset("a")
    assert limiter.hit("a") == 0
    limiter.reset()
    assert limiter.hit("b") == 0
