#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
HTTP Utilities Module

Provides the outbound HTTP operations used by the extractors:
- Header construction with a fixed bot identity
- Page fetches with timeout and redirect limits
- JSON fetches for oEmbed endpoints
- Translation of requests failures into the embed error taxonomy
"""

import logging
from typing import Any, Dict, Optional

import requests
from requests.models import Response

from embed_agent.core.exceptions import FetchError, FetchTimeoutError, UnreachableTargetError

# Configure logging
logger = logging.getLogger('http_utils')

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; EmbedBot/1.0; +https://example.com/bot)'
DOCUMENT_TIMEOUT = 10
OEMBED_TIMEOUT = 5
MAX_REDIRECTS = 5


def create_headers(
    user_agent: Optional[str] = None,
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    accept_language: str = "en-US,en;q=0.5",
    custom_headers: Optional[Dict[str, str]] = None
) -> Dict[str, str]:
    """
    Create HTTP headers for outbound requests.

    Args:
        user_agent: User-Agent string (bot identity if None)
        accept: Accept header value
        accept_language: Accept-Language header value
        custom_headers: Additional custom headers

    Returns:
        Dictionary of headers
    """
    headers = {
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
        "Accept": accept,
        "Accept-Language": accept_language,
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
    }

    if custom_headers:
        headers.update(custom_headers)

    return headers


def is_success_response(response: Response) -> bool:
    """
    Check if response indicates success (2xx status code).

    Args:
        response: HTTP response object

    Returns:
        True if successful
    """
    return 200 <= response.status_code < 300


def _get(
    url: str,
    params: Optional[Dict[str, str]],
    headers: Dict[str, str],
    timeout: float,
    max_redirects: int
) -> Response:
    # One session per call: nothing is shared between extraction requests
    with requests.Session() as session:
        session.max_redirects = max_redirects
        try:
            response = session.get(url, params=params, headers=headers, timeout=timeout)
        except requests.Timeout as e:
            raise FetchTimeoutError(f"Request to {url} timed out after {timeout}s") from e
        except requests.ConnectionError as e:
            raise UnreachableTargetError(f"Could not reach {url}: {e}") from e
        except requests.TooManyRedirects as e:
            raise FetchError(f"Too many redirects for {url}") from e
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

    if not is_success_response(response):
        raise FetchError(f"Request to {url} returned HTTP {response.status_code}")

    return response


def fetch_document(
    url: str,
    timeout: float = DOCUMENT_TIMEOUT,
    max_redirects: int = MAX_REDIRECTS,
    user_agent: Optional[str] = None
) -> str:
    """
    Fetch a page and return its HTML.

    Args:
        url: Page URL
        timeout: Timeout in seconds
        max_redirects: Maximum number of redirects to follow
        user_agent: User-Agent override

    Returns:
        Response body as text

    Raises:
        FetchTimeoutError: the deadline was exceeded
        UnreachableTargetError: DNS or connection failure
        FetchError: any other unusable response
    """
    logger.debug(f"Fetching document: {url}")
    response = _get(url, None, create_headers(user_agent), timeout, max_redirects)
    return response.text


def fetch_json(
    url: str,
    params: Optional[Dict[str, str]] = None,
    timeout: float = OEMBED_TIMEOUT,
    max_redirects: int = MAX_REDIRECTS,
    user_agent: Optional[str] = None
) -> Any:
    """
    Fetch a JSON document, typically from an oEmbed endpoint.

    Args:
        url: Endpoint URL
        params: Query parameters
        timeout: Timeout in seconds
        max_redirects: Maximum number of redirects to follow
        user_agent: User-Agent override

    Returns:
        Decoded JSON payload

    Raises:
        FetchError: on any failure, including an undecodable body
    """
    logger.debug(f"Fetching JSON: {url} {params or ''}")
    headers = create_headers(user_agent, accept="application/json")
    response = _get(url, params, headers, timeout, max_redirects)

    try:
        return response.json()
    except ValueError as e:
        raise FetchError(f"Invalid JSON returned by {url}") from e
