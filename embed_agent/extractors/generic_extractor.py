#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Generic Extractor Module

Fallback extractor for any http(s) URL. Reads OpenGraph, Twitter Card and
JSON-LD metadata from the fetched document and renders a link preview card.
Fetch and parse failures degrade to a minimal record built from the URL itself.
"""

import logging
from typing import Dict, Any, Optional

from bs4 import BeautifulSoup

from embed_agent.core.exceptions import ExtractionError, FetchError
from embed_agent.core.models import Author, ContentType, EmbedMetadata, Platform, Provider, RenderOptions
from embed_agent.extractors.base_extractor import BaseExtractor
from embed_agent.utils.html_utils import render_link_card
from embed_agent.utils.http_utils import DEFAULT_USER_AGENT, DOCUMENT_TIMEOUT, MAX_REDIRECTS, fetch_document
from embed_agent.utils.url_utils import get_base_url, get_display_domain, resolve_against_origin

logger = logging.getLogger('generic_extractor')

MERGE_POLICIES = ('gaps_only', 'per_field')
MINIMAL_DESCRIPTION = 'Visit this link to view the content'

MERGED_FIELDS = ('title', 'description', 'image', 'type')


def map_og_type(og_type: Optional[str]) -> Optional[ContentType]:
    """
    Map an OpenGraph ``og:type`` value to a content type.

    Args:
        og_type: Raw og:type value

    Returns:
        Content type, or None when no og:type is present
    """
    if not og_type:
        return None

    value = og_type.strip().lower()
    if value.startswith('video'):
        return ContentType.VIDEO
    if value.startswith('music'):
        return ContentType.AUDIO
    if value in ('article', 'blog', 'news'):
        return ContentType.ARTICLE
    return ContentType.LINK


def map_twitter_card(card: Optional[str]) -> Optional[ContentType]:
    """Map a ``twitter:card`` value to a content type."""
    if not card:
        return None

    value = card.strip().lower()
    if value == 'player':
        return ContentType.VIDEO
    if value in ('summary', 'summary_large_image'):
        return ContentType.ARTICLE
    return ContentType.LINK


def _parse_dimension(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        number = int(float(value))
    except (ValueError, OverflowError):
        return None
    return number if number > 0 else None


class GenericExtractor(BaseExtractor):
    """
    Extractor for arbitrary web pages.

    Fields are probed in priority order:
    - OpenGraph (og:*)
    - Twitter Card (twitter:*)
    - Bare HTML (<title>, meta[name=...])
    - JSON-LD, for anything still missing
    """

    is_fallback = True

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the generic extractor with optional configuration.

        Args:
            config: Configuration dictionary with extraction settings
        """
        super().__init__(config)

        # Default config values for generic extraction
        self.config.setdefault('timeout', DOCUMENT_TIMEOUT)
        self.config.setdefault('max_redirects', MAX_REDIRECTS)
        self.config.setdefault('user_agent', DEFAULT_USER_AGENT)
        self.config.setdefault('merge_policy', 'gaps_only')
        self.config.setdefault('strict', False)

        if self.config['merge_policy'] not in MERGE_POLICIES:
            raise ValueError(f"Unknown merge policy: {self.config['merge_policy']}")

    def can_handle(self, url: str) -> bool:
        return True

    def extract_metadata(self, url: str) -> EmbedMetadata:
        """
        Fetch a page and extract its preview metadata.

        Args:
            url: Normalized URL

        Returns:
            Extracted metadata, or a minimal record if the page is unavailable
            or cannot be parsed

        Raises:
            ExtractionError: only when the ``strict`` option is enabled
        """
        try:
            html = fetch_document(
                url,
                timeout=self.config['timeout'],
                max_redirects=self.config['max_redirects'],
                user_agent=self.config['user_agent'],
            )
        except FetchError as e:
            if self.config['strict']:
                raise
            logger.warning(f"Falling back to minimal metadata for {url}: {e}")
            return self.build_minimal_metadata(url)

        try:
            soup = BeautifulSoup(html, 'lxml')
            metadata = self.parse_document(soup, url)
        except Exception as e:
            if self.config['strict']:
                raise ExtractionError(f"Could not parse {url}: {e}") from e
            logger.warning(f"Falling back to minimal metadata for {url}, parse failed: {e}", exc_info=True)
            return self.build_minimal_metadata(url)

        metadata.provider = self._build_provider(url)

        return metadata

    def parse_document(self, soup: BeautifulSoup, url: str) -> EmbedMetadata:
        """
        Build metadata from a parsed document.

        Args:
            soup: Parsed document
            url: URL the document was fetched from

        Returns:
            Metadata without provider information
        """
        fields = self.extract_open_graph(soup)

        needs_secondary = not fields.get('title') or not fields.get('description')
        if self.config['merge_policy'] == 'per_field' or needs_secondary:
            fields = self.merge_fields(fields, self.extract_twitter_card(soup))

        self._fill_from_json_ld(fields, self.extract_structured_data(soup))

        image = fields.get('image')
        if image:
            image = resolve_against_origin(url, image)

        author = None
        if fields.get('author_name') or fields.get('author_url'):
            author = Author(name=fields.get('author_name'), url=fields.get('author_url'))

        return EmbedMetadata(
            url=url,
            platform=Platform.GENERIC,
            type=fields.get('type') or ContentType.LINK,
            title=fields.get('title') or get_display_domain(url),
            description=fields.get('description'),
            image=image,
            width=fields.get('width'),
            height=fields.get('height'),
            author=author,
        )

    def extract_open_graph(self, soup: BeautifulSoup) -> Dict[str, Any]:
        """
        Primary strategy: OpenGraph first, then Twitter Card and bare HTML tags.

        Args:
            soup: Parsed document

        Returns:
            Dictionary of candidate fields (missing fields are None)
        """
        author_name = self.get_meta_content(soup, ['og:site_name', 'twitter:site', 'author'])

        return {
            'title': (self.get_meta_content(soup, ['og:title', 'twitter:title', 'title'])
                      or self.get_document_title(soup)),
            'description': self.get_meta_content(soup, ['og:description', 'twitter:description', 'description']),
            'image': self.get_meta_content(soup, ['og:image', 'twitter:image', 'twitter:image:src']),
            'type': map_og_type(self.get_meta_content(soup, ['og:type'])),
            'width': _parse_dimension(self.get_meta_content(soup, ['og:video:width', 'twitter:player:width'])),
            'height': _parse_dimension(self.get_meta_content(soup, ['og:video:height', 'twitter:player:height'])),
            'author_name': author_name.lstrip('@') if author_name else None,
            'author_url': None,
        }

    def extract_twitter_card(self, soup: BeautifulSoup) -> Dict[str, Any]:
        """
        Secondary strategy: Twitter Card tags only.

        Args:
            soup: Parsed document

        Returns:
            Dictionary of candidate fields (missing fields are None)
        """
        return {
            'title': self.get_meta_content(soup, ['twitter:title']) or self.get_document_title(soup),
            'description': self.get_meta_content(soup, ['twitter:description']),
            'image': self.get_meta_content(soup, ['twitter:image', 'twitter:image:src']),
            'type': map_twitter_card(self.get_meta_content(soup, ['twitter:card'])),
        }

    def merge_fields(self, primary: Dict[str, Any], secondary: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fill gaps in the primary fields from the secondary strategy.

        Args:
            primary: Fields from the primary strategy (always win)
            secondary: Fields from the secondary strategy

        Returns:
            Merged fields
        """
        merged = dict(primary)
        for key in MERGED_FIELDS:
            if not merged.get(key) and secondary.get(key):
                merged[key] = secondary[key]
        return merged

    def _fill_from_json_ld(self, fields: Dict[str, Any], structured_data: list) -> None:
        for item in structured_data:
            if not fields.get('title'):
                fields['title'] = self.clean_text(_as_text(item.get('headline') or item.get('name'))) or None
            if not fields.get('description'):
                fields['description'] = self.clean_text(_as_text(item.get('description'))) or None
            if not fields.get('image'):
                fields['image'] = _json_ld_url(item.get('image') or item.get('thumbnailUrl'))

            author = item.get('author')
            if isinstance(author, list):
                author = author[0] if author else None
            if isinstance(author, dict):
                if not fields.get('author_name'):
                    fields['author_name'] = self.clean_text(_as_text(author.get('name'))) or None
                if not fields.get('author_url'):
                    fields['author_url'] = _as_text(author.get('url')) or None
            elif isinstance(author, str) and not fields.get('author_name'):
                fields['author_name'] = self.clean_text(author) or None

    def build_minimal_metadata(self, url: str) -> EmbedMetadata:
        """
        Minimal record used when the page cannot be fetched.

        Args:
            url: Normalized URL

        Returns:
            Metadata titled with the domain name
        """
        return EmbedMetadata(
            url=url,
            platform=Platform.GENERIC,
            type=ContentType.LINK,
            title=get_display_domain(url),
            description=MINIMAL_DESCRIPTION,
            provider=self._build_provider(url),
        )

    def generate_embed(self, metadata: EmbedMetadata, options: Optional[RenderOptions] = None) -> str:
        return render_link_card(metadata, options)

    def _build_provider(self, url: str) -> Provider:
        return Provider(name=get_display_domain(url), url=get_base_url(url))


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value and isinstance(value[0], str):
        return value[0]
    return ''


def _json_ld_url(value: Any) -> Optional[str]:
    # image may be a URL, an ImageObject, or a list of either
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get('url') or value.get('contentUrl')
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
