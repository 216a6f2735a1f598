#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Models Module

Data types passed between the URL classifier, the extractors and the
embed service.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional


class Platform(str, Enum):
    """Platforms known to the classifier. GENERIC covers everything else."""

    YOUTUBE = 'youtube'
    INSTAGRAM = 'instagram'
    TIKTOK = 'tiktok'
    LINKEDIN = 'linkedin'
    TWITTER = 'twitter'
    GENERIC = 'generic'


# Fixed dispatch order among the specific platforms
PLATFORM_PRIORITY = (
    Platform.YOUTUBE,
    Platform.INSTAGRAM,
    Platform.TIKTOK,
    Platform.LINKEDIN,
    Platform.TWITTER,
)


class ContentType(str, Enum):
    """Semantic classification of extracted content."""

    VIDEO = 'video'
    IMAGE = 'image'
    ARTICLE = 'article'
    AUDIO = 'audio'
    LINK = 'link'


@dataclass
class Author:
    name: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        return {k: v for k, v in (('name', self.name), ('url', self.url)) if v is not None}


@dataclass
class Provider:
    name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'url': self.url}


@dataclass
class EmbedMetadata:
    """
    Normalized preview metadata for a single URL.

    ``url``, ``platform`` and ``type`` are always set. ``embed_data`` is only
    filled by extractors that support direct in-app playback.
    """

    url: str
    platform: Platform = Platform.GENERIC
    type: ContentType = ContentType.LINK
    title: str = ''
    description: Optional[str] = None
    image: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    author: Optional[Author] = None
    provider: Optional[Provider] = None
    embed_data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the wire shape used by the HTTP API.

        Returns:
            Dictionary with unset optional fields omitted
        """
        data: Dict[str, Any] = {
            'url': self.url,
            'platform': Platform(self.platform).value,
            'type': ContentType(self.type).value,
            'title': self.title,
        }

        optional = {
            'description': self.description,
            'image': self.image,
            'width': self.width,
            'height': self.height,
            'author': self.author.to_dict() if self.author else None,
            'provider': self.provider.to_dict() if self.provider else None,
            'embedData': self.embed_data,
        }
        data.update({k: v for k, v in optional.items() if v is not None})

        return data


@dataclass
class RenderOptions:
    width: Optional[int] = None
    height: Optional[int] = None
    autoplay: bool = False
    controls: bool = True
    theme: str = 'light'


@dataclass
class OEmbedOptions:
    maxwidth: Optional[int] = None
    maxheight: Optional[int] = None
    format: str = 'json'
