#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
API Application Module

Builds the FastAPI application around an EmbedService:
- CORS for the configured client origins
- Per-client rate limiting
- Health and index endpoints
- JSON error bodies ``{error, message}`` for the embed error taxonomy
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from embed_agent import __version__
from embed_agent.api.routes import router
from embed_agent.config import load_config
from embed_agent.core.embed_service import EmbedService
from embed_agent.core.exceptions import EmbedAgentError
from embed_agent.middlewares.rate_limiter import RateLimiter, RateLimitMiddleware

logger = logging.getLogger('api')

AVAILABLE_ENDPOINTS = ['/health', '/api/extract', '/api/oembed', '/api/render']


def error_response(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': error, 'message': message, **extra})


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(config: Optional[Dict[str, Any]] = None, service: Optional[EmbedService] = None) -> FastAPI:
    """
    Create the embed API application.

    Args:
        config: Application configuration, loaded from file/environment if omitted
        service: Embed service to serve, built from ``config`` if omitted

    Returns:
        Configured FastAPI application
    """
    config = config or load_config()
    server_config = config.get('server', {})
    rate_limit_config = config.get('rate_limit', {})

    app = FastAPI(
        title='Embed Agent API',
        version=__version__,
        description='Link preview metadata, oEmbed and embeddable HTML for external content',
    )
    app.state.config = config
    app.state.service = service or EmbedService(config)
    app.state.started_at = time.monotonic()

    # Rate limiting sits inside CORS so rejected requests still carry CORS headers
    if rate_limit_config.get('enabled', True):
        app.add_middleware(
            RateLimitMiddleware,
            limiter=RateLimiter(
                max_requests=rate_limit_config.get('max_requests', 100),
                window_seconds=rate_limit_config.get('window_seconds', 900),
            ),
            exempt_paths=('/health',),
            trusted_proxies=server_config.get('trusted_proxies', []),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_config.get('cors_origins', []),
        allow_credentials=False,
        allow_methods=['GET', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization', 'X-Requested-With', 'X-Request-ID'],
        max_age=86400,
    )

    app.include_router(router)
    register_exception_handlers(app)
    register_system_routes(app)

    logger.info(f"Embed API created with {len(app.state.service.extractors)} extractors")

    return app


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EmbedAgentError)
    async def handle_embed_error(request: Request, exc: EmbedAgentError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc}")
            return error_response(
                exc.status_code,
                exc.title,
                str(exc) if exc.status_code == 501 else 'An error occurred while processing the request. Please try again later.',
            )

        logger.info(f"{request.url.path} rejected ({exc.status_code}): {exc}")
        return error_response(exc.status_code, exc.title, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return error_response(
                404,
                'Not found',
                'The requested endpoint does not exist',
                availableEndpoints=AVAILABLE_ENDPOINTS,
            )
        return error_response(exc.status_code, 'Request failed', str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                'error': 'Internal server error',
                'message': 'An unexpected error occurred',
                'timestamp': _timestamp(),
            },
        )


def register_system_routes(app: FastAPI) -> None:
    @app.get('/health', tags=['system'])
    def health(request: Request) -> Dict[str, Any]:
        return {
            'status': 'healthy',
            'timestamp': _timestamp(),
            'uptime': round(time.monotonic() - request.app.state.started_at, 3),
            'service': request.app.state.service.health_check(),
        }

    @app.get('/', tags=['system'])
    def index(request: Request) -> Dict[str, Any]:
        base_url = str(request.base_url).rstrip('/')
        youtube_example = quote('https://www.youtube.com/watch?v=dQw4w9WgXcQ', safe='')
        generic_example = quote('https://example.com', safe='')

        return {
            'name': 'Embed Agent API',
            'version': __version__,
            'description': 'External content embed API service',
            'endpoints': {
                'health': f"{base_url}/health",
                'extract': f"{base_url}/api/extract?url=<encoded_url>",
                'oembed': f"{base_url}/api/oembed?url=<encoded_url>&format=json&maxwidth=500",
                'render': f"{base_url}/api/render?url=<encoded_url>&width=500&height=300",
            },
            'supportedPlatforms': request.app.state.service.supported_platforms(),
            'documentation': {
                'extract': 'Extract metadata from a URL',
                'oembed': 'Generate oEmbed response for a URL',
                'render': 'Generate HTML embed for a URL',
            },
            'examples': {
                'youtube': f"{base_url}/api/extract?url={youtube_example}",
                'generic': f"{base_url}/api/oembed?url={generic_example}&format=json",
            },
        }
