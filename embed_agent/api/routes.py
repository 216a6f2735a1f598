#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
API Routes Module

The three embed endpoints. Query parameters are validated here, before the
embed service is called, so malformed input never triggers a fetch.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Tuple

import validators
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from embed_agent.core.embed_service import EmbedService
from embed_agent.core.exceptions import (
    EmbedAgentError, FormatNotSupportedError, InvalidInputError, InvalidURLError,
)
from embed_agent.core.models import OEmbedOptions, RenderOptions
from embed_agent.utils.html_utils import THEMES, render_error_page

logger = logging.getLogger('api')

router = APIRouter(prefix='/api', tags=['embed'])

SCHEME_PATTERN = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)
ALLOWED_SCHEMES = ('http', 'https')
MIN_DIMENSION = 1
MAX_DIMENSION = 2000
OEMBED_FORMATS = ('json', 'xml')

CACHE_CONTROL = 'public, max-age=3600'
RENDER_HEADERS = {
    'Cache-Control': CACHE_CONTROL,
    'X-Frame-Options': 'SAMEORIGIN',
    'X-Content-Type-Options': 'nosniff',
}


def get_service(request: Request) -> EmbedService:
    return request.app.state.service


def get_correlation_id(request: Request) -> Optional[str]:
    return request.headers.get('x-request-id')


def validate_url(url: Optional[str]) -> str:
    """
    Validate the ``url`` query parameter.

    A missing scheme is treated as https.

    Args:
        url: Raw parameter value

    Returns:
        Absolute http(s) URL

    Raises:
        InvalidURLError: the parameter is missing or not an http(s) URL
    """
    if url is None or not url.strip():
        raise InvalidURLError('Missing required parameter: url')

    candidate = url.strip()
    if not SCHEME_PATTERN.match(candidate):
        candidate = f"https://{candidate}"

    if not validators.url(candidate) or candidate.split('://', 1)[0].lower() not in ALLOWED_SCHEMES:
        raise InvalidURLError('Please provide a valid HTTP or HTTPS URL')

    return candidate


def parse_dimension(value: Optional[str], name: str) -> Optional[int]:
    """
    Parse a width/height parameter.

    Raises:
        InvalidInputError: not an integer between 1 and 2000
    """
    if value is None or value == '':
        return None

    try:
        number = int(value)
    except ValueError:
        number = None

    if number is None or not MIN_DIMENSION <= number <= MAX_DIMENSION:
        raise InvalidInputError(f"{name} must be a number between {MIN_DIMENSION} and {MAX_DIMENSION}")

    return number


def parse_flag(value: Optional[str], matches: Tuple[str, ...]) -> bool:
    return value is not None and value.strip().lower() in matches


def parse_theme(value: Optional[str]) -> str:
    if value is None or value == '':
        return 'light'
    if value not in THEMES:
        raise InvalidInputError(f"theme must be one of: {', '.join(THEMES)}")
    return value


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get('/extract')
def extract(
    request: Request,
    url: Optional[str] = None,
    service: EmbedService = Depends(get_service),
) -> Dict[str, Any]:
    """Extract metadata from a URL."""
    target = validate_url(url)
    metadata = service.extract_metadata(target, correlation_id=get_correlation_id(request))

    return {
        'success': True,
        'data': metadata.to_dict(),
        'timestamp': _timestamp(),
    }


@router.get('/oembed')
def oembed(
    request: Request,
    url: Optional[str] = None,
    response_format: str = Query('json', alias='format'),
    maxwidth: Optional[str] = None,
    maxheight: Optional[str] = None,
    service: EmbedService = Depends(get_service),
) -> JSONResponse:
    """Generate an oEmbed response for a URL."""
    if url is None or not url.strip():
        raise InvalidURLError('Missing required parameter: url')

    if response_format not in OEMBED_FORMATS:
        raise InvalidInputError('Format must be either "json" or "xml"')
    if response_format == 'xml':
        raise FormatNotSupportedError('XML format is not currently supported. Please use JSON format.')

    target = validate_url(url)
    options = OEmbedOptions(
        maxwidth=parse_dimension(maxwidth, 'maxwidth'),
        maxheight=parse_dimension(maxheight, 'maxheight'),
        format=response_format,
    )

    payload = service.get_oembed(target, options, correlation_id=get_correlation_id(request))

    return JSONResponse(content=payload, headers={'Cache-Control': CACHE_CONTROL})


@router.get('/render', response_class=HTMLResponse)
def render(
    request: Request,
    url: Optional[str] = None,
    width: Optional[str] = None,
    height: Optional[str] = None,
    autoplay: Optional[str] = None,
    controls: Optional[str] = None,
    theme: Optional[str] = None,
    service: EmbedService = Depends(get_service),
) -> HTMLResponse:
    """Render embeddable HTML for a URL. Failures are reported as an HTML page."""
    try:
        target = validate_url(url)
        options = RenderOptions(
            width=parse_dimension(width, 'width'),
            height=parse_dimension(height, 'height'),
            autoplay=parse_flag(autoplay, ('true', '1')),
            controls=not parse_flag(controls, ('false', '0')),
            theme=parse_theme(theme),
        )
        html = service.render_embed(target, options, correlation_id=get_correlation_id(request))

    except EmbedAgentError as e:
        logger.warning(f"Render failed for {url!r}: {e}")
        message = str(e) if e.status_code < 500 else None
        page = render_error_page(message) if message else render_error_page()
        return HTMLResponse(content=page, status_code=e.status_code)

    except Exception as e:
        logger.error(f"Unexpected render error for {url!r}: {e}", exc_info=True)
        return HTMLResponse(content=render_error_page(), status_code=500)

    return HTMLResponse(content=html, headers=RENDER_HEADERS)
