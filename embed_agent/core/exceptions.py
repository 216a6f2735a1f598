#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Exceptions Module

Error taxonomy shared by the extractors, the embed service and the HTTP layer.
Each error carries the HTTP status code and the short title the routing layer
reports for it.
"""


class EmbedAgentError(Exception):
    """Base class for all embed agent errors."""

    status_code = 500
    title = 'Internal server error'


class InvalidInputError(EmbedAgentError):
    """A request parameter failed validation."""

    status_code = 400
    title = 'Invalid input'


class InvalidURLError(InvalidInputError):
    """The URL is missing or malformed."""

    title = 'Invalid URL'


class FormatNotSupportedError(EmbedAgentError):
    """A recognised response format that is not implemented (oEmbed XML)."""

    status_code = 501
    title = 'Format not supported'


class ExtractionError(EmbedAgentError):
    """An extractor could not produce metadata."""

    title = 'Extraction failed'


class InvalidPlatformURLError(ExtractionError):
    """The URL was routed to a platform extractor but carries no content id."""

    status_code = 400
    title = 'Invalid URL'


class FetchError(ExtractionError):
    """A remote fetch returned an unusable response."""

    title = 'Fetch failed'


class UnreachableTargetError(FetchError):
    """DNS or connection failure while contacting the target host."""

    status_code = 404
    title = 'URL not accessible'


class FetchTimeoutError(FetchError):
    """A remote fetch exceeded its deadline."""

    status_code = 408
    title = 'Request timeout'


class UnsupportedContentError(EmbedAgentError):
    """No extractor is able to handle the URL."""

    status_code = 422
    title = 'Unsupported content'
