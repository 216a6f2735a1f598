#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Rate Limiter Middleware

Provides per-client request limiting for the HTTP API. Supports:
- Fixed window counting per client address (X-Forwarded-For from trusted proxies)
- Rate limit headers on every response
- 429 responses with Retry-After once the budget is spent
"""

import time
import logging
import threading
from typing import Callable, Dict, Optional, Sequence, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

# Configure logging
logger = logging.getLogger('rate_limiter')

DEFAULT_MAX_REQUESTS = 100
DEFAULT_WINDOW_SECONDS = 900


class RateLimiter:
    """
    Counts requests per client in fixed time windows.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the rate limiter.

        Args:
            max_requests: Requests allowed per client in one window
            window_seconds: Window length in seconds
            clock: Time source, replaceable in tests
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock

        # client -> (window start, requests counted in the window)
        self.windows: Dict[str, Tuple[float, int]] = {}
        self.last_purge = clock()

        # Thread synchronization
        self.lock = threading.Lock()

        logger.info(f"Rate limiter initialized: {max_requests} requests per {window_seconds}s")

    def hit(self, client: str) -> Tuple[bool, int, float]:
        """
        Record a request from a client.

        Args:
            client: Client identifier

        Returns:
            Tuple of (allowed, remaining requests, seconds until the window resets)
        """
        with self.lock:
            now = self.clock()
            if now - self.last_purge >= self.window_seconds:
                self._purge_expired(now)

            start, count = self.windows.get(client, (now, 0))

            if now - start >= self.window_seconds:
                start, count = now, 0

            reset_in = max(0.0, self.window_seconds - (now - start))

            if count >= self.max_requests:
                self.windows[client] = (start, count)
                return False, 0, reset_in

            count += 1
            self.windows[client] = (start, count)
            return True, self.max_requests - count, reset_in

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [client for client, (start, _) in self.windows.items() if now - start >= self.window_seconds]
        for client in expired:
            del self.windows[client]
        self.last_purge = now

        if expired:
            logger.debug(f"Dropped {len(expired)} expired rate limit windows")

    def reset(self) -> None:
        """
        Reset the rate limiter to its initial state.
        """
        with self.lock:
            self.windows.clear()
            self.last_purge = self.clock()
            logger.info("Rate limiter reset to initial state")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests with 429 once a client exceeds its budget.
    """

    def __init__(
        self,
        app: ASGIApp,
        limiter: Optional[RateLimiter] = None,
        exempt_paths: Tuple[str, ...] = (),
        trusted_proxies: Sequence[str] = ()
    ):
        super().__init__(app)
        self.limiter = limiter or RateLimiter()
        self.exempt_paths = exempt_paths
        self.trusted_proxies = frozenset(trusted_proxies)

    def _get_client_id(self, request: Request) -> str:
        peer = request.client.host if request.client else 'unknown'

        # X-Forwarded-For is only honoured when set by a configured proxy
        forwarded = request.headers.get('x-forwarded-for')
        if forwarded and peer in self.trusted_proxies:
            return forwarded.split(',')[0].strip() or peer

        return peer

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client = self._get_client_id(request)
        allowed, remaining, reset_in = self.limiter.hit(client)

        headers = {
            'X-RateLimit-Limit': str(self.limiter.max_requests),
            'X-RateLimit-Remaining': str(remaining),
        }

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client}")
            headers['Retry-After'] = str(int(reset_in) + 1)
            return JSONResponse(
                status_code=429,
                content={
                    'error': 'Too many requests',
                    'message': 'Too many requests from this IP, please try again later.',
                },
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)

        return response
