#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Extraction Outcome Module

Explicit result type for a single extraction attempt. The embed service
branches on the outcome status instead of on caught exceptions:

- SUCCESS: metadata is available
- RECOVERABLE: the extractor failed, another extractor may still succeed
- FATAL: no fallback is left, the error must reach the caller
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from embed_agent.core.exceptions import EmbedAgentError
from embed_agent.core.models import EmbedMetadata


class OutcomeStatus(Enum):
    SUCCESS = 'success'
    RECOVERABLE = 'recoverable'
    FATAL = 'fatal'


@dataclass
class ExtractionOutcome:
    status: OutcomeStatus
    extractor: str
    metadata: Optional[EmbedMetadata] = None
    error: Optional[EmbedAgentError] = None

    @classmethod
    def success(cls, extractor: str, metadata: EmbedMetadata) -> 'ExtractionOutcome':
        return cls(OutcomeStatus.SUCCESS, extractor, metadata=metadata)

    @classmethod
    def recoverable(cls, extractor: str, error: EmbedAgentError) -> 'ExtractionOutcome':
        return cls(OutcomeStatus.RECOVERABLE, extractor, error=error)

    @classmethod
    def fatal(cls, extractor: str, error: EmbedAgentError) -> 'ExtractionOutcome':
        return cls(OutcomeStatus.FATAL, extractor, error=error)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    def unwrap(self) -> EmbedMetadata:
        """
        Return the metadata of a successful outcome.

        Raises:
            EmbedAgentError: the recorded error for any other outcome
        """
        if self.ok and self.metadata is not None:
            return self.metadata
        raise self.error or EmbedAgentError(f"Extraction by {self.extractor} produced no metadata")
