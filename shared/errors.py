"""
Error hierarchy.

All domain errors derive from PipelineError so callers can catch one base
class. Routes translate these into HTTP responses.
"""

from typing import Optional


class PipelineError(Exception):
    """Base error for the pipeline backend."""

    def __init__(self, message: str, pipeline_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.pipeline_id = pipeline_id


class ConfigError(PipelineError):
    """Invalid or missing configuration."""


class AuthenticationError(PipelineError):
    """Shared secret missing or mismatched."""


class ValidationError(PipelineError):
    """Request payload or function input failed validation."""


class UpstreamError(PipelineError):
    """Third-party API failed or is not configured."""


class PersistenceError(PipelineError):
    """A write or read against the hosted store failed."""


class RefundError(PipelineError):
    """The refund_credits RPC failed."""
