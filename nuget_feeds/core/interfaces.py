"""
Core interfaces for nuget-feeds.

This module contains the data models shared by the feed fetchers, the search
and update coordinators and the manager facade.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from nuget_feeds.core.version import VersionKey


@dataclass(frozen=True)
class ManagerSource:
    """
    A configured feed endpoint.

    Sources are immutable and hashable so they can be used to group installed
    packages. The owning manager is carried along but takes no part in
    equality.
    """
    name: str
    url: str
    manager: Optional[Any] = field(default=None, compare=False, repr=False)

    @property
    def base_url(self) -> str:
        """URL without trailing slashes, ready to have a feed method appended."""
        return self.url.rstrip("/")


@dataclass(frozen=True)
class Candidate:
    """
    A parsed but not yet deduplicated feed entry.
    """
    id: str
    raw_version: str
    version_key: VersionKey

    @classmethod
    def from_raw(cls, package_id: str, raw_version: str) -> "Candidate":
        return cls(id=package_id, raw_version=raw_version, version_key=VersionKey.parse(raw_version))


@dataclass(frozen=True)
class Package:
    """
    A package found on a feed.

    Update results also carry the locally installed version.
    """
    name: str
    id: str
    version: str
    source: ManagerSource
    manager: Optional[Any] = field(default=None, compare=False, repr=False)
    installed_version: Optional[str] = None

    @property
    def is_upgradable(self) -> bool:
        return self.installed_version is not None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "id": self.id,
            "version": self.version,
            "source": self.source.name,
            "source_url": self.source.url,
        }
        if self.installed_version is not None:
            data["installed_version"] = self.installed_version
        return data


@dataclass(frozen=True)
class InstalledPackage:
    """
    A locally installed package as reported by the package manager.
    """
    id: str
    version: str
    source: ManagerSource


@dataclass(frozen=True)
class FeedFailure:
    """
    Recoverable failure of a single feed request.

    Returned instead of raising so that one broken source never aborts a
    query over several sources.
    """
    source: ManagerSource
    url: str
    reason: str
    status_code: Optional[int] = None

    def describe(self) -> str:
        if self.status_code is not None:
            return f"Failed to fetch api at Url={self.url} with status code {self.status_code}"
        return f"Failed to fetch api at Url={self.url}: {self.reason}"


class LoggableTaskType(Enum):
    """
    Kinds of task a TaskLogger can record.
    """
    FIND_PACKAGES = "find_packages"
    LIST_UPDATES = "list_updates"


@dataclass
class ManagerCapabilities:
    """
    Feature flags of a package manager.
    """
    supports_custom_sources: bool = True
    supports_custom_versions: bool = True
    supports_custom_package_icons: bool = True


@dataclass
class ManagerProperties:
    """
    Static properties of a package manager.
    """
    name: str = "NuGet"
    display_name: Optional[str] = None
    default_source: Optional[ManagerSource] = None
    known_sources: List[ManagerSource] = field(default_factory=list)


@dataclass
class FeedConfig:
    """
    Configuration for feed fetchers.
    """
    user_agent: str = "nuget-feeds/0.1.0"
    request_timeout: int = 30
    max_workers: int = 1
    verify_ssl: bool = True
    proxy: Optional[str] = None
