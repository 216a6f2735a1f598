#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Embed Service Module

Orchestrates URL validation, extractor selection and the fallback from a
platform extractor to the generic extractor. Provides:
- Metadata extraction
- oEmbed envelopes
- Rendered embed HTML
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from embed_agent.core.exceptions import InvalidURLError, UnsupportedContentError
from embed_agent.core.models import ContentType, EmbedMetadata, OEmbedOptions, Platform, RenderOptions
from embed_agent.core.outcome import ExtractionOutcome, OutcomeStatus
from embed_agent.extractors.base_extractor import BaseExtractor
from embed_agent.extractors.generic_extractor import GenericExtractor
from embed_agent.extractors.social_media_extractor import TikTokExtractor, TwitterExtractor
from embed_agent.extractors.youtube_extractor import YouTubeExtractor
from embed_agent.utils.url_utils import detect_platform, is_valid_url, normalize_url

logger = logging.getLogger('embed_service')

OEMBED_VERSION = '1.0'
OEMBED_CACHE_AGE = 3600
DEFAULT_OEMBED_WIDTH = 500
DEFAULT_OEMBED_HEIGHT = 300
DEFAULT_PROVIDER_NAME = 'External Content'

OEMBED_TYPES = {
    ContentType.VIDEO: 'video',
    ContentType.IMAGE: 'photo',
    ContentType.ARTICLE: 'rich',
    ContentType.AUDIO: 'rich',
    ContentType.LINK: 'link',
}


def map_oembed_type(content_type: Any) -> str:
    """
    Map an internal content type to an oEmbed type.

    Args:
        content_type: ContentType or its string value

    Returns:
        One of video, photo, rich, link (unknown values map to link)
    """
    try:
        return OEMBED_TYPES[ContentType(content_type)]
    except ValueError:
        return 'link'


def _tag(correlation_id: Optional[str]) -> str:
    return f"[{correlation_id}] " if correlation_id else ''


class EmbedService:
    """
    Entry point for the three embed operations.

    Platform extractors are tried in platform priority order and the generic
    extractor always comes last. The service holds no per-request state, so a
    single instance can serve concurrent requests.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the service and its extractors.

        Args:
            config: Application configuration; the ``fetch`` and ``generic``
                sections are passed on to the extractors
        """
        self.config = config or {}
        fetch_config = dict(self.config.get('fetch', {}))
        generic_config = {**fetch_config, **self.config.get('generic', {})}

        self.generic_extractor = GenericExtractor(generic_config)
        self.extractors: List[BaseExtractor] = [
            YouTubeExtractor(fetch_config),
            TikTokExtractor(fetch_config),
            TwitterExtractor(fetch_config),
            self.generic_extractor,
        ]
        self.started_at = time.monotonic()

    def find_extractor(self, url: str) -> Optional[BaseExtractor]:
        for extractor in self.extractors:
            if extractor.can_handle(url):
                return extractor
        return None

    def extract_metadata(self, url: str, correlation_id: Optional[str] = None) -> EmbedMetadata:
        """
        Extract metadata for a URL, falling back to the generic extractor.

        Args:
            url: URL to extract
            correlation_id: Optional caller token included in log records

        Returns:
            Metadata whose ``url`` is the normalized URL

        Raises:
            InvalidURLError: the URL is not a valid absolute URL
            UnsupportedContentError: no extractor handles the URL
            EmbedAgentError: the generic fallback failed as well
        """
        if not url or not is_valid_url(url):
            raise InvalidURLError(f"Invalid URL provided: {url!r}")

        normalized = normalize_url(url)
        extractor = self.find_extractor(normalized)
        if extractor is None:
            raise UnsupportedContentError(f"No suitable extractor found for URL: {normalized}")

        logger.info(f"{_tag(correlation_id)}Extracting {normalized} with {extractor.name}")
        outcome = extractor.run(normalized)

        if outcome.status is OutcomeStatus.RECOVERABLE:
            logger.warning(
                f"{_tag(correlation_id)}{outcome.extractor} failed ({outcome.error}), "
                f"retrying with {self.generic_extractor.name}"
            )
            outcome = self.generic_extractor.run(normalized)

        metadata = self._finish(outcome, correlation_id)
        metadata.url = normalized

        return metadata

    def get_oembed(
        self,
        url: str,
        options: Optional[OEmbedOptions] = None,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build an oEmbed response for a URL.

        Args:
            url: URL to embed
            options: maxwidth / maxheight requested by the consumer
            correlation_id: Optional caller token included in log records

        Returns:
            oEmbed dictionary; unset optional fields are omitted
        """
        options = options or OEmbedOptions()
        metadata = self.extract_metadata(url, correlation_id=correlation_id)

        render_options = RenderOptions(width=options.maxwidth, height=options.maxheight)
        html = self.renderer_for(metadata).generate_embed(metadata, render_options)

        content_type = ContentType(metadata.type)
        response: Dict[str, Any] = {
            'type': map_oembed_type(content_type),
            'version': OEMBED_VERSION,
            'html': html,
            'width': render_options.width or metadata.width or DEFAULT_OEMBED_WIDTH,
            'height': render_options.height or metadata.height or DEFAULT_OEMBED_HEIGHT,
            'title': metadata.title,
            'author_name': metadata.author.name if metadata.author else None,
            'author_url': metadata.author.url if metadata.author else None,
            'provider_name': metadata.provider.name if metadata.provider else DEFAULT_PROVIDER_NAME,
            'provider_url': metadata.provider.url if metadata.provider else None,
            'cache_age': OEMBED_CACHE_AGE,
        }

        if metadata.image and content_type in (ContentType.VIDEO, ContentType.IMAGE):
            response['thumbnail_url'] = metadata.image
            response['thumbnail_width'] = metadata.width
            response['thumbnail_height'] = metadata.height

        return {key: value for key, value in response.items() if value is not None}

    def render_embed(
        self,
        url: str,
        options: Optional[RenderOptions] = None,
        correlation_id: Optional[str] = None
    ) -> str:
        """
        Render embeddable HTML for a URL.

        Args:
            url: URL to embed
            options: Render options
            correlation_id: Optional caller token included in log records

        Returns:
            HTML fragment or document
        """
        metadata = self.extract_metadata(url, correlation_id=correlation_id)
        return self.renderer_for(metadata).generate_embed(metadata, options or RenderOptions())

    def renderer_for(self, metadata: EmbedMetadata) -> BaseExtractor:
        """Extractor that renders the metadata: the one matching its URL."""
        extractor = self.find_extractor(metadata.url)
        if extractor is None:
            raise UnsupportedContentError(f"No suitable extractor found for URL: {metadata.url}")
        return extractor

    def supported_platforms(self) -> List[str]:
        return [platform.value for platform in Platform]

    def is_platform_url(self, url: str, platform: Platform) -> bool:
        return detect_platform(url) == platform

    def health_check(self) -> Dict[str, Any]:
        return {
            'status': 'healthy',
            'extractors': len(self.extractors),
            'uptime': round(time.monotonic() - self.started_at, 3),
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }

    def _finish(self, outcome: ExtractionOutcome, correlation_id: Optional[str]) -> EmbedMetadata:
        if not outcome.ok:
            logger.error(f"{_tag(correlation_id)}Extraction failed in {outcome.extractor}: {outcome.error}")
        return outcome.unwrap()
