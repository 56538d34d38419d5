from .rate_limiter import SlidingWindowRateLimiter

__all__ = ["SlidingWindowRateLimiter"]
