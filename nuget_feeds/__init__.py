"""
nuget-feeds - search and update discovery against NuGet v2 (OData) feeds.

This package queries one or more feed sources for packages matching a term,
checks feeds for updates of installed packages, and reduces the entries of
each source to one highest-version package per id.
"""

__version__ = "0.1.0"

from .core.manager import NuGetManager, NuGetDetailsHelper
from .core.exceptions import NuGetFeedsError, FeedError, ConfigurationError
from .core.interfaces import InstalledPackage, ManagerSource, Package

__all__ = [
    "NuGetManager",
    "NuGetDetailsHelper",
    "NuGetFeedsError",
    "FeedError",
    "ConfigurationError",
    "InstalledPackage",
    "ManagerSource",
    "Package",
]
