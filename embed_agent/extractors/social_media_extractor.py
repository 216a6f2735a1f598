#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Social Media Extractor Module

Extractors for social platforms with a public oEmbed endpoint:
- TikTok (video, playable in-app when the numeric video id is known)
- Twitter / X (posts, rendered as link cards)
"""

from typing import Dict, Any, Optional

from bs4 import BeautifulSoup

from embed_agent.core.models import Author, ContentType, EmbedMetadata, Platform, RenderOptions
from embed_agent.extractors.oembed_extractor import OEmbedExtractor, parse_dimension
from embed_agent.utils.html_utils import render_link_card, render_responsive_iframe


TIKTOK_EMBED_BASE = 'https://www.tiktok.com/embed/v2'
TIKTOK_DEFAULT_WIDTH = 325
TIKTOK_DEFAULT_HEIGHT = 575


class TikTokExtractor(OEmbedExtractor):
    """
    Extractor for TikTok videos.

    Short links (vm.tiktok.com, vt.tiktok.com) carry an opaque code rather
    than the video id; the id reported by oEmbed is used when available.
    """

    platform = Platform.TIKTOK
    endpoint = 'https://www.tiktok.com/oembed'
    provider_name = 'TikTok'
    provider_url = 'https://www.tiktok.com'

    def build_metadata(self, content_id: str, url: str, payload: Dict[str, Any]) -> EmbedMetadata:
        author_name = payload.get('author_name')
        video_id = content_id if content_id.isdigit() else str(payload.get('embed_product_id') or '')

        return EmbedMetadata(
            url=url,
            platform=Platform.TIKTOK,
            type=ContentType.VIDEO,
            title=payload['title'] or 'TikTok Video',
            description=f"TikTok video by {author_name}" if author_name else 'Watch this video on TikTok',
            image=payload.get('thumbnail_url'),
            width=parse_dimension(payload.get('thumbnail_width')),
            height=parse_dimension(payload.get('thumbnail_height')),
            author=Author(name=author_name, url=payload.get('author_url')) if author_name else None,
            provider=self.build_provider(),
            embed_data=self._embed_data(video_id),
        )

    def build_fallback_metadata(self, content_id: str, url: str) -> EmbedMetadata:
        return EmbedMetadata(
            url=url,
            platform=Platform.TIKTOK,
            type=ContentType.VIDEO,
            title='TikTok Video',
            description='Watch this video on TikTok',
            width=TIKTOK_DEFAULT_WIDTH,
            height=TIKTOK_DEFAULT_HEIGHT,
            provider=self.build_provider(),
            embed_data=self._embed_data(content_id),
        )

    def generate_embed(self, metadata: EmbedMetadata, options: Optional[RenderOptions] = None) -> str:
        options = options or RenderOptions()
        embed_data = metadata.embed_data or {}

        if not embed_data.get('embedUrl'):
            return render_link_card(metadata, options, provider_label='TikTok', play_badge=True)

        return render_responsive_iframe(
            embed_data['embedUrl'],
            width=options.width or TIKTOK_DEFAULT_WIDTH,
            height=options.height or TIKTOK_DEFAULT_HEIGHT,
            title=metadata.title or 'TikTok Video',
            css_class='tiktok-embed',
        )

    def _embed_data(self, video_id: str) -> Optional[Dict[str, str]]:
        if not video_id or not video_id.isdigit():
            return None
        return {'videoId': video_id, 'embedUrl': f"{TIKTOK_EMBED_BASE}/{video_id}"}


class TwitterExtractor(OEmbedExtractor):
    """Extractor for posts on Twitter / X."""

    platform = Platform.TWITTER
    endpoint = 'https://publish.twitter.com/oembed'
    provider_name = 'X'
    provider_url = 'https://x.com'
    required_fields = ('author_name',)

    def build_metadata(self, content_id: str, url: str, payload: Dict[str, Any]) -> EmbedMetadata:
        author_name = payload['author_name']

        return EmbedMetadata(
            url=url,
            platform=Platform.TWITTER,
            type=ContentType.ARTICLE,
            title=f"Post by {author_name}",
            description=self.extract_post_text(payload.get('html')) or 'View this post on X',
            author=Author(name=author_name, url=payload.get('author_url')),
            provider=self.build_provider(),
        )

    def build_fallback_metadata(self, content_id: str, url: str) -> EmbedMetadata:
        return EmbedMetadata(
            url=url,
            platform=Platform.TWITTER,
            type=ContentType.ARTICLE,
            title='Post on X',
            description='View this post on X',
            provider=self.build_provider(),
        )

    def extract_post_text(self, html: Optional[str]) -> Optional[str]:
        """
        Pull the post text out of the oEmbed blockquote markup.

        Args:
            html: oEmbed ``html`` field

        Returns:
            Post text, or None if the markup has no paragraph
        """
        if not html:
            return None

        paragraph = BeautifulSoup(html, 'lxml').find('p')
        if paragraph is None:
            return None

        return self.clean_text(paragraph.get_text(' ')) or None

    def generate_embed(self, metadata: EmbedMetadata, options: Optional[RenderOptions] = None) -> str:
        return render_link_card(metadata, options, provider_label='X')
