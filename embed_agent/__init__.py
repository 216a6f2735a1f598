"""
Embed Agent: link preview metadata, oEmbed responses and embeddable HTML.
"""

__version__ = '1.0.0'

from .core.embed_service import EmbedService

__all__ = ['EmbedService', '__version__']
