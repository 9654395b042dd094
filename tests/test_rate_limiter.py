import asyncio
import time

import pytest

from cardkeeper.services.rate_limiter import RateLimiter


class FakeClock:
    """Manual clock; sleeping advances it."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class TestRateLimiter:
    async def test_first_call_does_not_wait(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await limiter.wait()

        assert clock.sleeps == []

    async def test_back_to_back_calls_are_spaced(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        await limiter.wait()
        await limiter.wait()

        assert clock.sleeps == pytest.approx([0.1, 0.1])

    async def test_only_remaining_interval_is_waited(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        clock.now += 0.04
        await limiter.wait()

        assert clock.sleeps == pytest.approx([0.06])

    async def test_no_wait_after_interval_elapsed(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        clock.now += 5
        await limiter.wait()

        assert clock.sleeps == []

    async def test_reset_forgets_last_call(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        limiter.reset()
        await limiter.wait()

        assert clock.sleeps == []

    async def test_concurrent_callers_are_serialized(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await asyncio.gather(*(limiter.wait() for _ in range(4)))

        assert clock.sleeps == pytest.approx([0.1, 0.1, 0.1])

    async def test_real_clock_spacing(self) -> None:
        """Three calls on the real clock take at least two intervals."""
        limiter = RateLimiter(0.1)

        start = time.monotonic()
        for _ in range(3):
            await limiter.wait()
        elapsed = time.monotonic() - start

        assert elapsed >= 0.2 - 0.01

    async def test_independent_limiters_do_not_share_budget(self) -> None:
        clock = FakeClock()
        first = RateLimiter(0.1, clock=clock, sleep=clock.sleep)
        second = RateLimiter(0.1, clock=clock, sleep=clock.sleep)

        await first.wait()
        await second.wait()

        assert clock.sleeps == []

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            RateLimiter(-1)
