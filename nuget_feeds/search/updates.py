"""
Update discovery for installed NuGet packages.

Installed packages are grouped by the source they came from and each source
is asked once, through GetUpdates(), for newer versions of all of its
packages.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from nuget_feeds.core.interfaces import (
    FeedFailure, InstalledPackage, LoggableTaskType, ManagerSource, Package
)
from nuget_feeds.core.naming import format_as_name
from nuget_feeds.core.task_logger import TaskLogger
from nuget_feeds.fetcher.parser import EntryShape, parse_entries
from nuget_feeds.fetcher.querier import SourceQuerier
from nuget_feeds.search.dedup import deduplicate
from nuget_feeds.search.executor import SourceExecutor


logger = logging.getLogger(__name__)


@dataclass
class SourceGroup:
    """
    Installed packages that came from one source.
    """
    source: ManagerSource
    packages: List[InstalledPackage] = field(default_factory=list)

    @property
    def ids(self) -> List[str]:
        return [package.id for package in self.packages]

    @property
    def versions(self) -> List[str]:
        return [package.version for package in self.packages]

    def installed_versions(self) -> Dict[str, str]:
        """Map each installed id to its installed version."""
        return {package.id: package.version for package in self.packages}


def group_by_source(installed: Iterable[InstalledPackage]) -> List[SourceGroup]:
    """
    Group installed packages by source, keeping first-seen source order.
    """
    groups: Dict[ManagerSource, SourceGroup] = {}
    for package in installed:
        group = groups.get(package.source)
        if group is None:
            group = groups[package.source] = SourceGroup(source=package.source)
        group.packages.append(package)
    return list(groups.values())


def lookup_installed_version(installed_versions: Dict[str, str], package_id: str) -> Optional[str]:
    """
    Find the installed version of an id. NuGet ids are case-insensitive, so
    an exact match is preferred and a case-insensitive one accepted.
    """
    if package_id in installed_versions:
        return installed_versions[package_id]
    lowered = package_id.lower()
    for installed_id, version in installed_versions.items():
        if installed_id.lower() == lowered:
            return version
    return None


class UpdateChecker:
    """
    Finds available updates for installed packages.
    """

    def __init__(self, querier: SourceQuerier, manager: Optional[Any] = None):
        """
        Initialize the update checker.

        Args:
            querier: Querier used to reach the feeds.
            manager: Manager that owns the returned packages.
        """
        self.querier = querier
        self.manager = manager

    def get_available_updates(
        self,
        installed: Iterable[InstalledPackage],
        task_logger: Optional[TaskLogger] = None,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> List[Package]:
        """
        Check every source of the installed packages for updates.

        Args:
            installed: Installed packages.
            task_logger: Logger for this task. A new one is created if None.
            deadline: Seconds after which unfinished sources are abandoned.
            cancel_event: Event that abandons unfinished sources when set.

        Returns:
            Packages carrying both the new and the installed version, grouped
            by source in first-seen source order.
        """
        task_logger = task_logger or TaskLogger.create_new(LoggableTaskType.LIST_UPDATES)
        groups = group_by_source(installed)

        executor = SourceExecutor(
            max_workers=self.querier.config.max_workers,
            deadline=deadline,
            cancel_event=cancel_event,
            on_abort=self.querier.close
        )

        def check_group(group: SourceGroup, timeout: Optional[float]) -> List[Package]:
            return self._check_group(group, task_logger, timeout)

        per_source = executor.run(groups, check_group)
        if executor.aborted:
            task_logger.error("Update check stopped before all sources answered")

        packages = [package for result in per_source if result for package in result]
        task_logger.close(0)
        return packages

    def _check_group(
        self,
        group: SourceGroup,
        task_logger: TaskLogger,
        timeout: Optional[float]
    ) -> List[Package]:
        source = group.source
        task_logger.log(
            f"Checking {len(group.packages)} packages for updates on source {source.name}"
        )
        body = self.querier.check_updates(source, group.ids, group.versions, timeout=timeout)
        if isinstance(body, FeedFailure):
            task_logger.error(body.describe())
            return []

        installed_versions = group.installed_versions()
        packages = []
        for candidate in deduplicate(parse_entries(body, EntryShape.UPDATE)).values():
            installed_version = lookup_installed_version(installed_versions, candidate.id)
            if installed_version is None:
                logger.debug(f"Ignoring update for {candidate.id}, which is not installed from {source.name}")
                continue

            task_logger.log(
                f"Found package {candidate.id} version {candidate.raw_version} on source {source.name}"
            )
            packages.append(Package(
                name=format_as_name(candidate.id),
                id=candidate.id,
                version=candidate.raw_version,
                source=source,
                manager=self.manager,
                installed_version=installed_version
            ))
        return packages
