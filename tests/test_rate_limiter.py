"""Tests for the in-process fixed-window rate limiter."""

from receptionist.infrastructure.rate_limiter import (
    FixedWindowRateLimiter,
    RateLimitConfig,
    get_client_ip,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


CONFIG = RateLimitConfig(requests=3, window_seconds=60, key_prefix="rl:test")


class TestFixedWindowRateLimiter:
    def test_allows_up_to_limit_then_blocks(self):
        limiter = FixedWindowRateLimiter(clock=FakeClock())

        results = [limiter.is_rate_limited("1.2.3.4", CONFIG) for _ in range(4)]

        assert [limited for limited, _, _ in results] == [False, False, False, True]
        assert [remaining for _, remaining, _ in results] == [2, 1, 0, 0]

    def test_window_resets_after_expiry(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)
        for _ in range(4):
            limiter.is_rate_limited("1.2.3.4", CONFIG)

        clock.now += 60

        limited, remaining, reset_seconds = limiter.is_rate_limited("1.2.3.4", CONFIG)
        assert limited is False
        assert remaining == 2
        assert reset_seconds == 60

    def test_reports_seconds_until_reset(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)
        for _ in range(3):
            limiter.is_rate_limited("1.2.3.4", CONFIG)

        clock.now += 45

        assert limiter.is_rate_limited("1.2.3.4", CONFIG) == (True, 0, 15)

    def test_keys_are_independent(self):
        limiter = FixedWindowRateLimiter(clock=FakeClock())
        for _ in range(3):
            limiter.is_rate_limited("1.2.3.4", CONFIG)

        assert limiter.is_rate_limited("5.6.7.8", CONFIG)[0] is False

    def test_expired_windows_are_evicted(self):
        clock = FakeClock()
        limiter = FixedWindowRateLimiter(clock=clock)
        for index in range(1100):
            limiter.is_rate_limited(f"10.0.{index // 256}.{index % 256}", CONFIG)

        clock.now += 61
        limiter.is_rate_limited("1.2.3.4", CONFIG)

        assert len(limiter._windows) == 1

    def test_reset_clears_counters(self):
        limiter = FixedWindowRateLimiter(clock=FakeClock())
        for _ in range(3):
            limiter.is_rate_limited("1.2.3.4", CONFIG)

        limiter.reset()

        assert limiter.is_rate_limited("1.2.3.4", CONFIG)[0] is False


class _Request:
    def __init__(self, headers, host="127.0.0.1"):
        self.headers = headers
        self.client = type("Client", (), {"host": host})()


def test_client_ip_prefers_forwarded_for():
    request = _Request({"X-Forwarded-For": "203.0.113.9, 10.0.0.1", "X-Real-IP": "10.0.0.2"})

    assert get_client_ip(request) == "203.0.113.9"


def test_client_ip_falls_back_to_peer():
    assert get_client_ip(_Request({})) == "127.0.0.1"
