"""
Metadata extractors for different platforms.
"""

from .base_extractor import BaseExtractor
from .oembed_extractor import OEmbedExtractor
from .youtube_extractor import YouTubeExtractor
from .social_media_extractor import TikTokExtractor, TwitterExtractor
from .generic_extractor import GenericExtractor

__all__ = [
    'BaseExtractor',
    'OEmbedExtractor',
    'YouTubeExtractor',
    'TikTokExtractor',
    'TwitterExtractor',
    'GenericExtractor'
]
