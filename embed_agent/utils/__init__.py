"""
Utility functions for URL classification, fetching and HTML rendering.
"""

from .url_utils import (
    detect_platform,
    extract_content_id,
    extract_youtube_video_id,
    extract_instagram_post_id,
    extract_tiktok_video_id,
    extract_linkedin_post_id,
    extract_twitter_tweet_id,
    normalize_url,
    is_valid_url,
    is_embeddable,
    get_domain,
    get_display_domain,
    get_base_url,
    resolve_against_origin,
    is_same_domain
)

from .http_utils import (
    create_headers,
    is_success_response,
    fetch_document,
    fetch_json
)

from .html_utils import (
    escape_html,
    render_link_card,
    render_responsive_iframe,
    render_error_page
)

__all__ = [
    # URL utilities
    'detect_platform', 'extract_content_id', 'extract_youtube_video_id',
    'extract_instagram_post_id', 'extract_tiktok_video_id', 'extract_linkedin_post_id',
    'extract_twitter_tweet_id', 'normalize_url', 'is_valid_url', 'is_embeddable',
    'get_domain', 'get_display_domain', 'get_base_url', 'resolve_against_origin',
    'is_same_domain',

    # HTTP utilities
    'create_headers', 'is_success_response', 'fetch_document', 'fetch_json',

    # HTML utilities
    'escape_html', 'render_link_card', 'render_responsive_iframe', 'render_error_page'
]
