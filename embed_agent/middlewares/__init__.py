"""
Middleware components for the embed API.
"""

from .rate_limiter import RateLimiter, RateLimitMiddleware

__all__ = ['RateLimiter', 'RateLimitMiddleware']
