"""Rate Limiter — sliding-window budget per client key.

Tests cover:
    - requests up to the budget pass, the next one is refused
    - refused requests are not recorded
    - the window slides: old hits expire
    - keys are independent; cleanup drops idle keys
"""

from roster.infrastructure.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _limiter(max_requests=3, window=60):
    clock = FakeClock()
    return RateLimiter(max_requests, window, clock=clock), clock


def test_allows_up_to_budget_then_refuses():
    limiter, _ = _limiter()
    assert [limiter.check("a") for _ in range(4)] == [True, True, True, False]


def test_remaining_counts_down():
    limiter, _ = _limiter()
    assert limiter.remaining("a") == 3
    limiter.check("a")
    assert limiter.remaining("a") == 2


def test_window_slides():
    limiter, clock = _limiter()
    for _ in range(3):
        limiter.check("a")
        clock.now += 10
    assert limiter.check("a") is False
    clock.now = 1000.0 + 60.5
    assert limiter.check("a") is True


def test_refused_requests_do_not_extend_lockout():
    limiter, clock = _limiter(max_requests=1)
    limiter.check("a")
    clock.now += 30
    assert limiter.check("a") is False
    clock.now = 1000.0 + 61
    assert limiter.check("a") is True


def test_retry_after_is_time_until_oldest_hit_expires():
    limiter, clock = _limiter(max_requests=1)
    limiter.check("a")
    clock.now += 20
    limiter.check("a")
    assert limiter.retry_after("a") == 40


def test_retry_after_is_zero_when_not_limited():
    limiter, _ = _limiter()
    assert limiter.retry_after("a") == 0


def test_keys_are_independent():
    limiter, _ = _limiter(max_requests=1)
    assert limiter.check("a")
    assert limiter.check("b")
    assert not limiter.check("a")


def test_cleanup_drops_idle_keys():
    limiter, clock = _limiter()
    limiter.check("a")
    clock.now += 120
    limiter.cleanup()
    assert limiter._hits == {}
