"""
NuGet package manager facade.

This module wires the feed querier, the search engine and the update checker
behind the two operations a package manager exposes: finding packages and
listing available updates.
"""

import logging
import threading
from typing import Callable, List, Optional

from nuget_feeds.core.exceptions import ConfigurationError
from nuget_feeds.core.interfaces import (
    FeedConfig, InstalledPackage, LoggableTaskType, ManagerCapabilities,
    ManagerProperties, ManagerSource, Package
)
from nuget_feeds.core.task_logger import TaskLogger
from nuget_feeds.fetcher.querier import SourceQuerier
from nuget_feeds.search.engine import FeedSearchEngine
from nuget_feeds.search.updates import UpdateChecker


logger = logging.getLogger(__name__)

InstalledPackagesProvider = Callable[[], List[InstalledPackage]]


class NuGetDetailsHelper:
    """
    Package details provider for NuGet-based managers.

    Managers built on NuGet feeds must keep this provider.
    """

    def package_url(self, package: Package) -> str:
        """URL of the feed entry describing a package version."""
        return f"{package.source.base_url}/Packages(Id='{package.id}',Version='{package.version}')"


class NuGetManager:
    """
    Package manager backed by NuGet v2 feeds.
    """

    def __init__(
        self,
        properties: ManagerProperties,
        capabilities: Optional[ManagerCapabilities] = None,
        sources_helper=None,
        installed_provider: Optional[InstalledPackagesProvider] = None,
        details_helper: Optional[object] = None,
        config: Optional[FeedConfig] = None,
        querier: Optional[SourceQuerier] = None
    ):
        """
        Initialize the manager.

        Args:
            properties: Static manager properties, including the default source.
            capabilities: Feature flags. Defaults to every capability enabled.
            sources_helper: Object with a ``get_sources()`` method returning the
                configured sources.
            installed_provider: Callable returning the installed packages.
            details_helper: Package details provider. Defaults to a NuGetDetailsHelper.
            config: Feed configuration.
            querier: Querier to use instead of building one from ``config``.
        """
        self.properties = properties
        self.capabilities = capabilities or ManagerCapabilities()
        self.sources_helper = sources_helper
        self.installed_provider = installed_provider
        self.details_helper = details_helper if details_helper is not None else NuGetDetailsHelper()
        self.config = config or FeedConfig()
        self.querier = querier or SourceQuerier(self.config)

        self.search_engine = FeedSearchEngine(self.querier, manager=self)
        self.update_checker = UpdateChecker(self.querier, manager=self)
        self._initialized = False

    @property
    def name(self) -> str:
        return self.properties.name

    def initialize(self) -> None:
        """
        Check the manager wiring.

        Raises:
            ConfigurationError: If the manager breaks the NuGet manager contract.
        """
        if self._initialized:
            return

        if not isinstance(self.details_helper, NuGetDetailsHelper):
            raise ConfigurationError(
                "NuGet-based package managers must not reassign the package details provider"
            )
        if not self.capabilities.supports_custom_versions:
            raise ConfigurationError("NuGet-based package managers must support custom versions")
        if not self.capabilities.supports_custom_package_icons:
            raise ConfigurationError("NuGet-based package managers must support custom package icons")
        if not self.capabilities.supports_custom_sources and self.properties.default_source is None:
            raise ConfigurationError(
                "NuGet-based package managers without custom sources need a default source"
            )

        self._initialized = True
        logger.debug(f"Initialized package manager {self.name}")

    def get_sources(self) -> List[ManagerSource]:
        """
        Sources to search: the configured ones when custom sources are
        supported, otherwise the default source alone.
        """
        if self.capabilities.supports_custom_sources and self.sources_helper is not None:
            return list(self.sources_helper.get_sources())
        if self.properties.default_source is None:
            return []
        return [self.properties.default_source]

    def find_packages(
        self,
        term: str,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> List[Package]:
        """
        Search every source for packages matching a term.

        Args:
            term: Search term.
            deadline: Seconds after which unfinished sources are abandoned.
            cancel_event: Event that abandons unfinished sources when set.

        Returns:
            Packages found, possibly partial if some sources failed.
        """
        self.initialize()
        task_logger = TaskLogger.create_new(LoggableTaskType.FIND_PACKAGES)
        return self.search_engine.find_packages(
            term,
            self.get_sources(),
            task_logger=task_logger,
            deadline=deadline,
            cancel_event=cancel_event
        )

    def get_available_updates(
        self,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> List[Package]:
        """
        List updates for the installed packages.

        Args:
            deadline: Seconds after which unfinished sources are abandoned.
            cancel_event: Event that abandons unfinished sources when set.

        Returns:
            Packages carrying the new version and the installed one.
        """
        self.initialize()
        task_logger = TaskLogger.create_new(LoggableTaskType.LIST_UPDATES)
        installed = self.installed_provider() if self.installed_provider is not None else []
        return self.update_checker.get_available_updates(
            installed,
            task_logger=task_logger,
            deadline=deadline,
            cancel_event=cancel_event
        )
