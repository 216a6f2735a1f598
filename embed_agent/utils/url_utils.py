#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
URL Utilities Module

Provides utilities for classifying and manipulating shared URLs:
- Platform detection from an ordered pattern table
- URL normalization (tracking parameter removal)
- Platform content id extraction
- URL validation and domain helpers
"""

import re
from typing import Dict, List, Optional, Pattern
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode, urljoin

from embed_agent.core.models import Platform, PLATFORM_PRIORITY

# Query parameters that only carry campaign or click attribution
TRACKING_PARAMS = frozenset([
    'utm_source', 'utm_medium', 'utm_campaign', 'utm_term', 'utm_content',
    'fbclid', 'gclid', 'ref', 'source', 'campaign_id',
])

_HTTP = r'^(?:https?://)?'

# Ordered signatures per platform. The first capture group is the content id.
PLATFORM_PATTERNS: Dict[Platform, List[Pattern]] = {
    Platform.YOUTUBE: [
        re.compile(_HTTP + r'(?:(?:www|m|music)\.)?youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]{11})', re.IGNORECASE),
        re.compile(_HTTP + r'(?:www\.)?youtu\.be/([A-Za-z0-9_-]{11})', re.IGNORECASE),
        re.compile(_HTTP + r'(?:(?:www|m)\.)?youtube(?:-nocookie)?\.com/(?:embed|v|e|shorts|live)/([A-Za-z0-9_-]{11})', re.IGNORECASE),
        re.compile(r'^(?:vnd\.youtube|youtube)://(?:watch\?(?:[^#]*&)?v=)?([A-Za-z0-9_-]{11})', re.IGNORECASE),
    ],
    Platform.INSTAGRAM: [
        re.compile(_HTTP + r'(?:www\.)?(?:instagram\.com|instagr\.am)/(?:[A-Za-z0-9_.]+/)?(?:p|reels?|tv)/([A-Za-z0-9_-]+)', re.IGNORECASE),
        re.compile(r'^instagram://media\?(?:[^#]*&)?id=(\d+)', re.IGNORECASE),
    ],
    Platform.TIKTOK: [
        re.compile(_HTTP + r'(?:(?:www|m)\.)?tiktok\.com/@[^/]+/video/(\d+)', re.IGNORECASE),
        re.compile(_HTTP + r'(?:vm|vt)\.tiktok\.com/([A-Za-z0-9]+)', re.IGNORECASE),
        re.compile(_HTTP + r'(?:www\.)?tiktok\.com/t/([A-Za-z0-9]+)', re.IGNORECASE),
    ],
    Platform.LINKEDIN: [
        re.compile(_HTTP + r'(?:www\.)?linkedin\.com/posts/([A-Za-z0-9_%-]+)', re.IGNORECASE),
        re.compile(_HTTP + r'(?:www\.)?linkedin\.com/pulse/([A-Za-z0-9_%-]+)', re.IGNORECASE),
        re.compile(_HTTP + r'(?:www\.)?linkedin\.com/feed/update/(urn:li:(?:activity|share|ugcPost):\d+)', re.IGNORECASE),
    ],
    Platform.TWITTER: [
        re.compile(_HTTP + r'(?:(?:www|mobile)\.)?(?:twitter|x)\.com/[^/?#]+/status(?:es)?/(\d+)', re.IGNORECASE),
        re.compile(r'^twitter://status\?(?:[^#]*&)?id=(\d+)', re.IGNORECASE),
    ],
    Platform.GENERIC: [
        re.compile(r'^https?://.+', re.IGNORECASE),
    ],
}

_SCHEME_RE = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)


def detect_platform(url: str) -> Platform:
    """
    Detect which platform a URL belongs to.

    Specific platforms are tried in PLATFORM_PRIORITY order and the first
    matching signature wins. Anything else is generic.

    Args:
        url: URL to classify

    Returns:
        Detected platform
    """
    candidate = (url or '').strip()

    for platform in PLATFORM_PRIORITY:
        for pattern in PLATFORM_PATTERNS[platform]:
            if pattern.search(candidate):
                return platform

    return Platform.GENERIC


def _first_capture(url: str, platform: Platform) -> Optional[str]:
    candidate = (url or '').strip()

    for pattern in PLATFORM_PATTERNS[platform]:
        match = pattern.search(candidate)
        if match and match.group(1):
            return match.group(1)

    return None


def extract_youtube_video_id(url: str) -> Optional[str]:
    return _first_capture(url, Platform.YOUTUBE)


def extract_instagram_post_id(url: str) -> Optional[str]:
    return _first_capture(url, Platform.INSTAGRAM)


def extract_tiktok_video_id(url: str) -> Optional[str]:
    return _first_capture(url, Platform.TIKTOK)


def extract_linkedin_post_id(url: str) -> Optional[str]:
    return _first_capture(url, Platform.LINKEDIN)


def extract_twitter_tweet_id(url: str) -> Optional[str]:
    return _first_capture(url, Platform.TWITTER)


def extract_content_id(url: str, platform: Platform) -> Optional[str]:
    """
    Extract the per-post identifier for any specific platform.

    Args:
        url: URL to inspect
        platform: Platform whose patterns should be applied

    Returns:
        Captured id, or None for generic URLs and non-matching URLs
    """
    if platform == Platform.GENERIC:
        return None
    return _first_capture(url, platform)


def normalize_url(url: str) -> str:
    """
    Normalize a shared URL.

    Adds an https scheme when none is present, lowercases scheme and host,
    and removes known tracking query parameters. The remaining parameters
    keep their order. Unparseable input is returned unchanged.

    Args:
        url: URL to normalize

    Returns:
        Normalized URL
    """
    candidate = url.strip()
    if not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"

    try:
        parts = urlsplit(candidate)
        # Raises ValueError on a malformed port
        parts.port
    except ValueError:
        return url

    if not parts.scheme or not parts.netloc:
        return url

    scheme = parts.scheme.lower()

    netloc = parts.netloc
    # App deep links carry case-sensitive ids in the authority
    if scheme in ('http', 'https'):
        if '@' in netloc:
            userinfo, host = netloc.rsplit('@', 1)
            netloc = f"{userinfo}@{host.lower()}"
        else:
            netloc = netloc.lower()

    path = parts.path
    if not path and scheme in ('http', 'https'):
        path = '/'

    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        kept = [(k, v) for k, v in pairs if k not in TRACKING_PARAMS]
        if len(kept) != len(pairs):
            query = urlencode(kept)

    return urlunsplit((scheme, netloc, path, query, parts.fragment))


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: URL to validate

    Returns:
        True if URL has both a scheme and a network location
    """
    try:
        result = urlsplit(url)
        return all([result.scheme, result.netloc])
    except (ValueError, TypeError, AttributeError):
        return False


def is_embeddable(url: str) -> bool:
    """Check that a URL is valid and uses the http or https scheme."""
    if not is_valid_url(url):
        return False
    return urlsplit(url).scheme.lower() in ('http', 'https')


def get_domain(url: str) -> str:
    """
    Extract the domain from a URL.

    Args:
        url: URL to extract domain from

    Returns:
        Lowercase host name without port
    """
    try:
        return (urlsplit(url).hostname or '').lower()
    except ValueError:
        return ''


def get_display_domain(url: str) -> str:
    """Host name without a leading ``www.``, used as a last-resort title."""
    domain = get_domain(url)
    if not domain:
        return 'Unknown'
    if domain.startswith('www.'):
        domain = domain[4:]
    return domain


def get_base_url(url: str) -> str:
    """
    Get the base URL (scheme + domain) from a full URL.

    Args:
        url: URL to extract base from

    Returns:
        Base URL (scheme + domain)
    """
    parsed = urlsplit(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_against_origin(page_url: str, href: str) -> str:
    """
    Resolve a possibly relative reference against the page's origin.

    Args:
        page_url: URL of the document the reference was found in
        href: Absolute, protocol-relative or relative reference

    Returns:
        Absolute URL
    """
    return urljoin(get_base_url(page_url) + '/', href.strip())


def is_same_domain(url1: str, url2: str) -> bool:
    """
    Check if two URLs belong to the same domain.

    Args:
        url1: First URL
        url2: Second URL

    Returns:
        True if URLs belong to the same non-empty domain
    """
    domain = get_domain(url1)
    return bool(domain) and domain == get_domain(url2)
