#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Base Extractor Module

Provides the base class for all metadata extractors. Extractors are responsible
for turning a URL into normalized EmbedMetadata for one platform (or generically)
and for rendering that metadata as embeddable HTML.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, Sequence

from bs4 import BeautifulSoup

from embed_agent.core.exceptions import EmbedAgentError, ExtractionError
from embed_agent.core.models import EmbedMetadata, RenderOptions
from embed_agent.core.outcome import ExtractionOutcome

logger = logging.getLogger('extractors')

META_ATTRIBUTES = ('property', 'name', 'itemprop')


class BaseExtractor(ABC):
    """
    Base class for all metadata extractors.

    All specific extractors should inherit from this class and implement
    can_handle, extract_metadata and generate_embed.
    """

    # Set on the catch-all extractor: its failures cannot fall back any further
    is_fallback = False

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the extractor with optional configuration.

        Args:
            config: Configuration dictionary for customizing extraction behavior
        """
        self.config = dict(config or {})

    @property
    def name(self) -> str:
        return self.__class__.__name__.replace('Extractor', '').lower()

    @abstractmethod
    def can_handle(self, url: str) -> bool:
        """
        Check if this extractor can handle a given URL.

        Args:
            url: Normalized URL

        Returns:
            True if the extractor should be used for this URL
        """
        pass

    @abstractmethod
    def extract_metadata(self, url: str) -> EmbedMetadata:
        """
        Extract metadata for a URL.

        Args:
            url: Normalized URL

        Returns:
            Extracted metadata

        Raises:
            EmbedAgentError: when no usable metadata can be produced
        """
        pass

    @abstractmethod
    def generate_embed(self, metadata: EmbedMetadata, options: Optional[RenderOptions] = None) -> str:
        """
        Render metadata as embeddable HTML.

        Args:
            metadata: Metadata produced by an extractor
            options: Render options

        Returns:
            HTML string
        """
        pass

    def run(self, url: str) -> ExtractionOutcome:
        """
        Extract metadata and report the result as an explicit outcome.

        Failures of a platform extractor, unexpected exceptions included, are
        recoverable so the generic extractor can still be tried. Embed errors
        from the fallback extractor are fatal; anything else it raises
        propagates.

        Args:
            url: Normalized URL

        Returns:
            Extraction outcome
        """
        try:
            return ExtractionOutcome.success(self.name, self.extract_metadata(url))
        except EmbedAgentError as e:
            if self.is_fallback:
                logger.error(f"{self.name} extraction failed for {url}: {e}")
                return ExtractionOutcome.fatal(self.name, e)
            logger.warning(f"{self.name} extraction failed for {url}: {e}")
            return ExtractionOutcome.recoverable(self.name, e)
        except Exception as e:
            if self.is_fallback:
                raise
            logger.warning(f"{self.name} extraction crashed for {url}: {e}", exc_info=True)
            error = ExtractionError(f"Unexpected {type(e).__name__} in {self.name} extractor: {e}")
            error.__cause__ = e
            return ExtractionOutcome.recoverable(self.name, error)

    def clean_text(self, text: Optional[str]) -> str:
        """
        Clean and normalize a text string.

        Args:
            text: Text to clean

        Returns:
            Cleaned text
        """
        if not text:
            return ""

        # Remove extra whitespace
        cleaned = ' '.join(text.split())

        return cleaned.strip()

    def get_meta_content(self, soup: BeautifulSoup, keys: Sequence[str]) -> Optional[str]:
        """
        Look up the first non-empty meta tag content among several keys.

        For each key, in order, ``meta[property=…]``, ``meta[name=…]`` and
        ``meta[itemprop=…]`` are probed.

        Args:
            soup: Parsed document
            keys: Meta keys in priority order

        Returns:
            Trimmed content or None
        """
        for key in keys:
            for attribute in META_ATTRIBUTES:
                tag = soup.select_one(f'meta[{attribute}="{key}"]')
                if tag is None:
                    continue
                content = self.clean_text(tag.get('content'))
                if content:
                    return content

        return None

    def get_document_title(self, soup: BeautifulSoup) -> Optional[str]:
        title = soup.find('title')
        if title is None:
            return None
        return self.clean_text(title.get_text()) or None

    def extract_structured_data(self, soup: BeautifulSoup) -> List[Dict[str, Any]]:
        """
        Extract JSON-LD structured data from a web page.

        List payloads and ``@graph`` containers are flattened so every entry
        is a single JSON-LD object.

        Args:
            soup: BeautifulSoup object representing the parsed HTML

        Returns:
            List of parsed JSON-LD objects
        """
        structured_data = []

        # Find all JSON-LD script tags
        for script in soup.find_all('script', type='application/ld+json'):
            try:
                data = json.loads(script.string or '')
            except (json.JSONDecodeError, TypeError):
                logger.debug("Skipping unparseable JSON-LD block")
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if not isinstance(item, dict):
                    continue
                graph = item.get('@graph')
                if isinstance(graph, list):
                    structured_data.extend(node for node in graph if isinstance(node, dict))
                else:
                    structured_data.append(item)

        return structured_data
