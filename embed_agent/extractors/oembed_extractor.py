#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
oEmbed Extractor Module

Base class for platform extractors backed by a public oEmbed endpoint.
The platform content id is required; the oEmbed call is best effort and
falls back to a basic record built from the id alone.
"""

import logging
from abc import abstractmethod
from typing import Dict, Any, Optional

from jsonschema import ValidationError, validate

from embed_agent.core.exceptions import FetchError, InvalidPlatformURLError
from embed_agent.core.models import EmbedMetadata, Platform, Provider
from embed_agent.extractors.base_extractor import BaseExtractor
from embed_agent.utils.http_utils import DEFAULT_USER_AGENT, OEMBED_TIMEOUT, fetch_json
from embed_agent.utils.url_utils import detect_platform, extract_content_id

logger = logging.getLogger('oembed_extractor')

_DIMENSION = {'type': ['integer', 'number', 'string', 'null']}

OEMBED_PROPERTIES = {
    'type': {'type': 'string'},
    'version': {'type': ['string', 'number']},
    'title': {'type': 'string'},
    'author_name': {'type': 'string'},
    'author_url': {'type': 'string'},
    'provider_name': {'type': 'string'},
    'provider_url': {'type': 'string'},
    'html': {'type': ['string', 'null']},
    'width': _DIMENSION,
    'height': _DIMENSION,
    'thumbnail_url': {'type': 'string'},
    'thumbnail_width': _DIMENSION,
    'thumbnail_height': _DIMENSION,
}


def parse_dimension(value: Any) -> Optional[int]:
    """Coerce an oEmbed dimension to a positive int."""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number > 0 else None


class OEmbedExtractor(BaseExtractor):
    """
    Extractor for a platform that publishes an oEmbed endpoint.

    Subclasses set the class attributes below and implement
    build_metadata and build_fallback_metadata.
    """

    platform: Platform = Platform.GENERIC
    endpoint: str = ''
    provider_name: str = ''
    provider_url: str = ''
    required_fields = ('title',)

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self.config.setdefault('oembed_timeout', OEMBED_TIMEOUT)
        self.config.setdefault('user_agent', DEFAULT_USER_AGENT)

    def can_handle(self, url: str) -> bool:
        return detect_platform(url) == self.platform

    def extract_id(self, url: str) -> Optional[str]:
        return extract_content_id(url, self.platform)

    def extract_metadata(self, url: str) -> EmbedMetadata:
        """
        Extract metadata through the platform oEmbed endpoint.

        Args:
            url: Normalized URL

        Returns:
            Metadata from oEmbed, or the basic record when oEmbed is unavailable

        Raises:
            InvalidPlatformURLError: the URL carries no content id
        """
        content_id = self.extract_id(url)
        if not content_id:
            raise InvalidPlatformURLError(f"Invalid {self.provider_name} URL: {url}")

        payload = self.fetch_oembed(url)
        if payload is None:
            return self.build_fallback_metadata(content_id, url)

        return self.build_metadata(content_id, url, payload)

    def oembed_schema(self) -> Dict[str, Any]:
        return {
            'type': 'object',
            'properties': OEMBED_PROPERTIES,
            'required': list(self.required_fields),
        }

    def fetch_oembed(self, url: str) -> Optional[Dict[str, Any]]:
        """
        Query the oEmbed endpoint for a URL.

        Args:
            url: Content URL

        Returns:
            Validated oEmbed payload, or None on any failure
        """
        try:
            payload = fetch_json(
                self.endpoint,
                params={'url': url, 'format': 'json'},
                timeout=self.config['oembed_timeout'],
                user_agent=self.config['user_agent'],
            )
        except FetchError as e:
            logger.warning(f"{self.provider_name} oEmbed request failed: {e}")
            return None

        try:
            validate(instance=payload, schema=self.oembed_schema())
        except ValidationError as e:
            logger.warning(f"{self.provider_name} oEmbed payload rejected: {e.message}")
            return None

        return payload

    def build_provider(self) -> Provider:
        return Provider(name=self.provider_name, url=self.provider_url)

    @abstractmethod
    def build_metadata(self, content_id: str, url: str, payload: Dict[str, Any]) -> EmbedMetadata:
        """Map a validated oEmbed payload to metadata."""
        pass

    @abstractmethod
    def build_fallback_metadata(self, content_id: str, url: str) -> EmbedMetadata:
        """Build the basic record used when oEmbed is unavailable."""
        pass
