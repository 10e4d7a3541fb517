"""Rate limiting for public endpoints.

In-process fixed-window counter keyed by client IP. Each worker keeps its own
counters, so under horizontal scaling this is a soft throttle rather than an
exact limit.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

from receptionist.core.errors import RateLimitError
from receptionist.settings import settings

logger = logging.getLogger(__name__)

# Sweep expired windows once the map grows past this many keys
_EVICTION_THRESHOLD = 1024


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    requests: int  # Number of requests allowed per window
    window_seconds: int  # Window length in seconds
    key_prefix: str = "ratelimit"


@dataclass
class _Window:
    count: int
    reset_at: float


RATE_LIMITS = {
    # Lead forms - public, unauthenticated
    "leads": RateLimitConfig(
        requests=settings.lead_rate_limit_requests,
        window_seconds=settings.lead_rate_limit_window_seconds,
        key_prefix="rl:leads",
    ),
    # Demo calls - each request dials a real phone
    "demo_call": RateLimitConfig(
        requests=settings.lead_rate_limit_requests,
        window_seconds=settings.lead_rate_limit_window_seconds,
        key_prefix="rl:demo",
    ),
    "default": RateLimitConfig(requests=100, window_seconds=60, key_prefix="rl:api"),
}


class FixedWindowRateLimiter:
    """In-memory fixed-window rate limiter."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._windows: dict[str, _Window] = {}
        self._clock = clock

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]

    def is_rate_limited(
        self,
        key: str,
        config: RateLimitConfig,
    ) -> tuple[bool, int, int]:
        """Count a request and report whether it exceeds the window.

        Args:
            key: Unique identifier (client IP)
            config: Rate limit configuration

        Returns:
            Tuple of (is_limited, remaining_requests, reset_time_seconds)
        """
        now = self._clock()
        full_key = f"{config.key_prefix}:{key}"

        if len(self._windows) > _EVICTION_THRESHOLD:
            self._evict_expired(now)

        window = self._windows.get(full_key)
        if window is None or now >= window.reset_at:
            # Window expired (or first request) - start a new one lazily
            self._windows[full_key] = _Window(count=1, reset_at=now + config.window_seconds)
            return False, config.requests - 1, config.window_seconds

        reset_seconds = max(1, int(window.reset_at - now))
        if window.count >= config.requests:
            return True, 0, reset_seconds

        window.count += 1
        return False, config.requests - window.count, reset_seconds

    def reset(self) -> None:
        """Drop all counters."""
        self._windows.clear()


# Global rate limiter instance
rate_limiter = FixedWindowRateLimiter()


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies.

    Args:
        request: FastAPI request

    Returns:
        Client IP address
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP (original client)
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


def rate_limit(
    config_name: str = "default",
    key_func: Callable[[Request], str] | None = None,
):
    """FastAPI dependency for rate limiting.

    Args:
        config_name: Name of rate limit config from RATE_LIMITS
        key_func: Optional function to extract rate limit key from request.
                  Defaults to using client IP.

    Returns:
        FastAPI dependency function

    Usage:
        @router.post("/leads")
        async def submit_lead(
            _: None = Depends(rate_limit("leads")),
        ):
            ...
    """
    config = RATE_LIMITS.get(config_name, RATE_LIMITS["default"])

    async def rate_limit_dependency(request: Request) -> None:
        key = key_func(request) if key_func else get_client_ip(request)

        is_limited, remaining, reset_seconds = rate_limiter.is_rate_limited(key, config)

        request.state.rate_limit_remaining = remaining
        request.state.rate_limit_reset = reset_seconds

        if is_limited:
            logger.warning(
                f"[RATE_LIMIT] Request blocked from {key} on {request.url.path} "
                f"(limit: {config.requests}/{config.window_seconds}s)"
            )
            raise RateLimitError("Too many requests. Please try again later.", reset_seconds)

    return rate_limit_dependency
