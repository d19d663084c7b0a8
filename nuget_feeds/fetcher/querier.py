"""
NuGet OData feed querier.

Builds the Search() and GetUpdates() request URLs for a source and returns
either the response body or a FeedFailure. Nothing raised while talking to
a feed escapes this module.
"""

import logging
from typing import Optional, Sequence, Union
from urllib.parse import quote_plus

import requests

from nuget_feeds.core.exceptions import FeedError
from nuget_feeds.core.interfaces import FeedConfig, FeedFailure, ManagerSource
from nuget_feeds.fetcher.base import HttpFeedFetcher
from nuget_feeds.fetcher.error_handler import ErrorContext, FeedErrorHandler


logger = logging.getLogger(__name__)

QueryResult = Union[str, FeedFailure]

ID_SEPARATOR = "|"


def build_search_url(source: ManagerSource, term: str) -> str:
    """Build the Search() URL for a term."""
    return (
        f"{source.base_url}/Search()?searchTerm=%27{quote_plus(term)}%27"
        f"&targetFramework=%27%27&includePrerelease=false"
    )


def join_with_trailing_separator(values: Sequence[str]) -> str:
    """Join values with ``|``, terminating the list with a separator as well."""
    return "".join(f"{value}{ID_SEPARATOR}" for value in values)


def build_updates_url(source: ManagerSource, ids: Sequence[str], versions: Sequence[str]) -> str:
    """Build the GetUpdates() URL for installed ids and their versions."""
    return (
        f"{source.base_url}/GetUpdates()"
        f"?packageIds=%27{quote_plus(join_with_trailing_separator(ids))}%27"
        f"&versions=%27{quote_plus(join_with_trailing_separator(versions))}%27"
        f"&includePrerelease=0&includeAllVersions=0"
    )


class SourceQuerier(HttpFeedFetcher):
    """
    Issues search and update-check requests against NuGet v2 feeds.
    """

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        error_handler: Optional[FeedErrorHandler] = None
    ):
        """
        Initialize the querier.

        Args:
            config: Configuration for the HTTP session.
            error_handler: Handler that converts request errors to failures.
        """
        super().__init__(config=config, headers={"Accept": "application/atom+xml,application/xml"})
        self.error_handler = error_handler or FeedErrorHandler()

    def search(self, source: ManagerSource, term: str, timeout: Optional[float] = None) -> QueryResult:
        """
        Search a source for packages matching a term.

        Args:
            source: Feed to query.
            term: Free-text search term.
            timeout: Optional request timeout overriding the configured one.

        Returns:
            Response body, or FeedFailure if the request failed.
        """
        return self._query(source, build_search_url(source, term), timeout)

    def check_updates(
        self,
        source: ManagerSource,
        ids: Sequence[str],
        versions: Sequence[str],
        timeout: Optional[float] = None
    ) -> QueryResult:
        """
        Ask a source for updates of installed packages.

        Args:
            source: Feed to query.
            ids: Installed package ids.
            versions: Installed versions, parallel to ``ids``.
            timeout: Optional request timeout overriding the configured one.

        Returns:
            Response body, or FeedFailure if the request failed.
        """
        if len(ids) != len(versions):
            raise ValueError(f"Got {len(ids)} ids but {len(versions)} versions")
        return self._query(source, build_updates_url(source, ids, versions), timeout)

    def _query(self, source: ManagerSource, url: str, timeout: Optional[float]) -> QueryResult:
        try:
            return self._fetch_text(url, timeout=timeout)
        except (FeedError, requests.exceptions.RequestException) as e:
            return self.error_handler.handle(e, ErrorContext(source=source, url=url))
