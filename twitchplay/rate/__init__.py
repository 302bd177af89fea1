"""Rate limiting toolkit."""

from .rate_limiter import ChatRateInfo, ChatRateLimiter  # noqa: F401

__all__ = ["ChatRateLimiter", "ChatRateInfo"]
