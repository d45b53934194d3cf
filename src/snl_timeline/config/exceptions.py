"""Exceptions for config module.

This module defines exceptions related to configuration loading,
parsing, and validation errors.
"""

from snl_timeline.exceptions import SNLTimelineError

__all__ = ["ConfigurationError"]


class ConfigurationError(SNLTimelineError):
    """Base exception for configuration-related errors."""

    pass
