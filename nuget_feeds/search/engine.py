"""
Package search across NuGet feed sources.

This module provides the search engine that queries every configured source
for a term and assembles one package per id and source.
"""

import logging
import threading
from typing import Any, List, Optional

from nuget_feeds.core.interfaces import (
    FeedFailure, LoggableTaskType, ManagerSource, Package
)
from nuget_feeds.core.naming import format_as_name
from nuget_feeds.core.task_logger import TaskLogger
from nuget_feeds.fetcher.parser import EntryShape, parse_entries
from nuget_feeds.fetcher.querier import SourceQuerier
from nuget_feeds.search.dedup import deduplicate
from nuget_feeds.search.executor import SourceExecutor


logger = logging.getLogger(__name__)


class FeedSearchEngine:
    """
    Searches NuGet feeds for packages.

    Sources are independent: a failing source is logged and skipped and the
    others still contribute their packages.
    """

    def __init__(self, querier: SourceQuerier, manager: Optional[Any] = None):
        """
        Initialize the search engine.

        Args:
            querier: Querier used to reach the feeds.
            manager: Manager that owns the returned packages.
        """
        self.querier = querier
        self.manager = manager

    def find_packages(
        self,
        term: str,
        sources: List[ManagerSource],
        task_logger: Optional[TaskLogger] = None,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> List[Package]:
        """
        Search every source for a term.

        Args:
            term: Search term.
            sources: Sources to query, in order.
            task_logger: Logger for this task. A new one is created if None.
            deadline: Seconds after which unfinished sources are abandoned.
            cancel_event: Event that abandons unfinished sources when set.

        Returns:
            Packages grouped by source in source order; within a source, in
            the order ids first appeared in the feed.
        """
        task_logger = task_logger or TaskLogger.create_new(LoggableTaskType.FIND_PACKAGES)

        executor = SourceExecutor(
            max_workers=self.querier.config.max_workers,
            deadline=deadline,
            cancel_event=cancel_event,
            on_abort=self.querier.close
        )

        def search_source(source: ManagerSource, timeout: Optional[float]) -> List[Package]:
            return self._search_source(term, source, task_logger, timeout)

        per_source = executor.run(sources, search_source)
        if executor.aborted:
            task_logger.error(f"Search for '{term}' stopped before all sources answered")

        packages = [package for result in per_source if result for package in result]
        task_logger.close(0)
        return packages

    def _search_source(
        self,
        term: str,
        source: ManagerSource,
        task_logger: TaskLogger,
        timeout: Optional[float]
    ) -> List[Package]:
        task_logger.log(
            f"Begin package search for '{term}' on source {source.name} ({source.url})"
        )
        body = self.querier.search(source, term, timeout=timeout)
        if isinstance(body, FeedFailure):
            task_logger.error(body.describe())
            return []

        packages = []
        for candidate in deduplicate(parse_entries(body, EntryShape.SEARCH)).values():
            task_logger.log(
                f"Found package {candidate.id} version {candidate.raw_version} on source {source.name}"
            )
            packages.append(Package(
                name=format_as_name(candidate.id),
                id=candidate.id,
                version=candidate.raw_version,
                source=source,
                manager=self.manager
            ))
        return packages
