"""Core components for nuget-feeds."""

from .configuration import ConfigurationManager, StaticSourcesHelper
from .interfaces import (
    Candidate,
    FeedConfig,
    FeedFailure,
    InstalledPackage,
    ManagerCapabilities,
    ManagerProperties,
    ManagerSource,
    Package
)
from .exceptions import (
    NuGetFeedsError,
    FeedError,
    ConfigurationError
)
from .version import VersionKey, compare_versions

__all__ = [
    "ConfigurationManager",
    "StaticSourcesHelper",
    "Candidate",
    "FeedConfig",
    "FeedFailure",
    "InstalledPackage",
    "ManagerCapabilities",
    "ManagerProperties",
    "ManagerSource",
    "Package",
    "NuGetFeedsError",
    "FeedError",
    "ConfigurationError",
    "VersionKey",
    "compare_versions"
]
