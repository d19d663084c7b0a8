"""
Feed fetcher module for nuget-feeds.

This module provides functionality to query NuGet v2 feeds and extract
package entries from their responses.
"""

from nuget_feeds.fetcher.base import FeedFetcher, HttpFeedFetcher
from nuget_feeds.fetcher.error_handler import ErrorContext, FeedErrorHandler
from nuget_feeds.fetcher.parser import EntryShape, parse_entries
from nuget_feeds.fetcher.querier import SourceQuerier

__all__ = [
    "FeedFetcher",
    "HttpFeedFetcher",
    "ErrorContext",
    "FeedErrorHandler",
    "EntryShape",
    "parse_entries",
    "SourceQuerier"
]
