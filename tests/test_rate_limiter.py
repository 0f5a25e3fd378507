"""
Tests for rate_limiter.py

Uses a fake clock so no test waits on the wall clock.
"""

import pytest
from unittest.mock import patch

from market_data.rate_limiter import RateLimiter


class FakeClock:
    """Monotonic clock advanced only by sleep() or explicitly"""

    def __init__(self, start=100.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestRateLimiter:
    """Test fixed-interval gating"""

    def test_first_acquire_is_immediate(self, clock):
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        assert limiter.acquire() == 0.0
        assert clock.sleeps == []

    def test_back_to_back_acquires_wait_full_interval(self, clock):
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        limiter.acquire()
        limiter.acquire()
        limiter.acquire()

        assert clock.sleeps == [pytest.approx(0.3), pytest.approx(0.3)]

    def test_waits_only_remaining_interval(self, clock):
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        limiter.acquire()
        clock.advance(0.2)
        waited = limiter.acquire()

        assert waited == pytest.approx(0.1)
        assert clock.sleeps == [pytest.approx(0.1)]

    def test_no_wait_after_interval_elapsed(self, clock):
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        limiter.acquire()
        clock.advance(1.0)

        assert limiter.acquire() == 0.0
        assert clock.sleeps == []

    def test_reset(self, clock):
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        limiter.acquire()
        limiter.reset()

        assert limiter.acquire() == 0.0

    def test_zero_interval_never_sleeps(self, clock):
        limiter = RateLimiter(0, clock=clock, sleep=clock.sleep)

        for _ in range(5):
            limiter.acquire()

        assert clock.sleeps == []

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            RateLimiter(-1)

    @patch('market_data.rate_limiter.time.sleep')
    def test_default_sleep_is_time_sleep(self, mock_sleep):
        limiter = RateLimiter(60.0)

        limiter.acquire()
        limiter.acquire()

        mock_sleep.assert_called_once()
        assert 0 < mock_sleep.call_args[0][0] <= 60.0

    def test_interval_measured_from_release(self, clock):
        """A request slower than the interval still gets the full wait afterwards"""
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        for _ in range(3):
            limiter.acquire()
            clock.advance(0.5)  # request in flight
            limiter.release()

        assert clock.sleeps == [pytest.approx(0.3), pytest.approx(0.3)]

    def test_release_after_partial_idle_time(self, clock):
        limiter = RateLimiter(0.3, clock=clock, sleep=clock.sleep)

        limiter.acquire()
        clock.advance(0.5)
        limiter.release()
        clock.advance(0.1)

        assert limiter.acquire() == pytest.approx(0.2)
