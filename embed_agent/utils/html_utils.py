#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
HTML Utilities Module

Markup building blocks shared by the embed renderers:
- Escaping
- Link preview card
- Responsive iframe wrapper
- Standalone error page
"""

import html
from typing import Optional

from embed_agent.core.models import EmbedMetadata, Platform, RenderOptions
from embed_agent.utils.url_utils import get_base_url, get_display_domain, is_valid_url

DEFAULT_CARD_WIDTH = 500

THEMES = {
    'light': {'background': '#fff', 'border': '#e1e5e9', 'title': '#1d2129', 'muted': '#65676b'},
    'dark': {'background': '#18191a', 'border': '#3e4042', 'title': '#e4e6eb', 'muted': '#b0b3b8'},
}

PLAY_ICON = '<svg width="24" height="24" viewBox="0 0 24 24" fill="white"><path d="M8 5v14l11-7z"/></svg>'


def escape_html(text: Optional[str]) -> str:
    """Escape text for use in element content and quoted attributes."""
    return html.escape(text or '', quote=True)


def get_theme(name: Optional[str]) -> dict:
    return THEMES.get(name or 'light', THEMES['light'])


def get_favicon_url(url: str) -> Optional[str]:
    """Best guess favicon location: ``{origin}/favicon.ico``."""
    if not is_valid_url(url):
        return None
    return f"{get_base_url(url)}/favicon.ico"


def aspect_ratio_padding(width: int, height: int) -> str:
    """Padding-bottom percentage that keeps width:height for a fluid box."""
    return f"{height / width * 100:.2f}%"


def render_link_card(
    metadata: EmbedMetadata,
    options: Optional[RenderOptions] = None,
    provider_label: Optional[str] = None,
    play_badge: bool = False
) -> str:
    """
    Render a bordered link preview card.

    Args:
        metadata: Metadata to display
        options: Render options (width and theme are honoured)
        provider_label: Footer label, defaults to the provider or domain name
        play_badge: Overlay a play button on the cover image

    Returns:
        HTML fragment
    """
    options = options or RenderOptions()
    theme = get_theme(options.theme)
    max_width = options.width or metadata.width or DEFAULT_CARD_WIDTH
    title = escape_html(metadata.title or 'Untitled')

    parts = [
        f'<div class="embed-card embed-card--{Platform(metadata.platform).value}" style="border: 1px solid {theme["border"]}; '
        f'border-radius: 8px; overflow: hidden; max-width: {max_width}px; margin: 0 auto; '
        f'background: {theme["background"]}; font-family: -apple-system, BlinkMacSystemFont, \'Segoe UI\', Roboto, sans-serif;">'
    ]

    if metadata.image:
        parts.append('<div style="position: relative; overflow: hidden;">')
        parts.append(
            f'<img src="{escape_html(metadata.image)}" alt="{title}" '
            f'style="width: 100%; height: 200px; object-fit: cover; display: block;" '
            f'onerror="this.style.display=\'none\'">'
        )
        if play_badge:
            parts.append(
                '<div style="position: absolute; top: 50%; left: 50%; transform: translate(-50%, -50%); '
                'background: rgba(0,0,0,0.8); border-radius: 50%; width: 60px; height: 60px; '
                f'display: flex; align-items: center; justify-content: center;">{PLAY_ICON}</div>'
            )
        parts.append('</div>')

    parts.append('<div style="padding: 16px;">')
    parts.append(
        f'<h3 style="margin: 0 0 8px 0; font-size: 16px; font-weight: 600; color: {theme["title"]}; line-height: 1.3;">'
        f'<a href="{escape_html(metadata.url)}" target="_blank" rel="noopener noreferrer" '
        f'style="text-decoration: none; color: inherit;">{title}</a></h3>'
    )

    if metadata.description:
        parts.append(
            f'<p style="margin: 0 0 12px 0; color: {theme["muted"]}; font-size: 14px; line-height: 1.4; '
            'display: -webkit-box; -webkit-line-clamp: 3; -webkit-box-orient: vertical; overflow: hidden;">'
            f'{escape_html(metadata.description)}</p>'
        )

    label = provider_label or (metadata.provider.name if metadata.provider else get_display_domain(metadata.url))
    parts.append(
        f'<div style="display: flex; align-items: center; color: {theme["muted"]}; font-size: 12px; '
        'text-transform: uppercase; font-weight: 600; letter-spacing: 0.5px;">'
    )
    favicon = get_favicon_url(metadata.url)
    if favicon:
        parts.append(
            f'<img src="{escape_html(favicon)}" alt="" style="width: 16px; height: 16px; margin-right: 8px; '
            'border-radius: 2px;" onerror="this.style.display=\'none\'">'
        )
    parts.append(f'<span>{escape_html(label)}</span>')
    if metadata.author and metadata.author.name:
        parts.append(f'<span>&nbsp;&bull; {escape_html(metadata.author.name)}</span>')
    parts.append('</div></div></div>')

    return '\n'.join(parts)


def render_responsive_iframe(src: str, width: int, height: int, title: str, css_class: str) -> str:
    """
    Render an iframe that scales with its container and keeps its aspect ratio.

    Args:
        src: Player URL
        width: Intrinsic width, used as the max width
        height: Intrinsic height
        title: Accessible title
        css_class: Class of the outer wrapper

    Returns:
        HTML fragment
    """
    return (
        f'<div class="{css_class}" style="position: relative; width: 100%; max-width: {width}px; margin: 0 auto;">'
        f'<div style="position: relative; padding-bottom: {aspect_ratio_padding(width, height)}; height: 0; overflow: hidden;">'
        f'<iframe src="{escape_html(src)}" '
        'style="position: absolute; top: 0; left: 0; width: 100%; height: 100%; border: none;" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture" '
        f'allowfullscreen title="{escape_html(title)}"></iframe>'
        '</div></div>'
    )


def render_error_page(message: str = 'An error occurred while generating the embed. Please try again later.') -> str:
    """Standalone HTML document shown when an embed cannot be rendered."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Embed Error</title>
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 0; padding: 20px; background: #f5f5f5; color: #333; }}
    .error-container {{ max-width: 500px; margin: 0 auto; background: white; border-radius: 8px; padding: 24px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); text-align: center; }}
    .error-title {{ font-size: 18px; font-weight: 600; margin-bottom: 8px; color: #e74c3c; }}
    .error-message {{ color: #666; line-height: 1.5; }}
  </style>
</head>
<body>
  <div class="error-container">
    <div class="error-title">Embed Error</div>
    <div class="error-message">{escape_html(message)}</div>
  </div>
</body>
</html>
"""
