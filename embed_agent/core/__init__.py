"""
Core models, error taxonomy and the embed service.
"""

from .exceptions import (
    EmbedAgentError,
    InvalidInputError,
    InvalidURLError,
    FormatNotSupportedError,
    ExtractionError,
    InvalidPlatformURLError,
    FetchError,
    UnreachableTargetError,
    FetchTimeoutError,
    UnsupportedContentError
)
from .models import (
    Platform,
    PLATFORM_PRIORITY,
    ContentType,
    Author,
    Provider,
    EmbedMetadata,
    RenderOptions,
    OEmbedOptions
)
from .outcome import ExtractionOutcome, OutcomeStatus

__all__ = [
    # Errors
    'EmbedAgentError', 'InvalidInputError', 'InvalidURLError', 'FormatNotSupportedError',
    'ExtractionError', 'InvalidPlatformURLError', 'FetchError', 'UnreachableTargetError',
    'FetchTimeoutError', 'UnsupportedContentError',

    # Models
    'Platform', 'PLATFORM_PRIORITY', 'ContentType', 'Author', 'Provider',
    'EmbedMetadata', 'RenderOptions', 'OEmbedOptions',

    # Outcomes
    'ExtractionOutcome', 'OutcomeStatus'
]
