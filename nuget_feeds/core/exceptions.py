"""
Exceptions for nuget-feeds.

This module contains the exception hierarchy for nuget-feeds operations.
"""


class NuGetFeedsError(Exception):
    """Base exception for nuget-feeds operations."""
    pass


class FeedError(NuGetFeedsError):
    """Raised when a feed request fails."""

    def __init__(self, message: str, url: str = "", status_code: int = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ConfigurationError(NuGetFeedsError):
    """Raised when configuration is invalid or a manager is wired incorrectly."""
    pass
