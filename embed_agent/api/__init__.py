"""
HTTP API for the embed service.
"""

from .app import create_app

__all__ = ['create_app']
