"""
Centralized error handling for feed fetchers.

This module provides the FeedErrorHandler class, which turns exceptions raised
while querying a feed into FeedFailure values and keeps failure statistics.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict

import requests

from nuget_feeds.core.exceptions import FeedError
from nuget_feeds.core.interfaces import FeedFailure, ManagerSource


logger = logging.getLogger(__name__)


@dataclass
class ErrorContext:
    """Context information for error handling."""
    source: ManagerSource
    url: str


class FeedErrorHandler:
    """
    Centralized error handler for feed fetchers.

    Failures are always scoped to the source described by the context; the
    handler never re-raises.
    """

    def __init__(self):
        """Initialize the error handler."""
        self._lock = threading.Lock()
        self._ssl_failed_urls = set()
        self._network_failed_urls = set()
        self._http_failed_urls = set()

        self._error_stats = {
            'network_errors': 0,
            'ssl_errors': 0,
            'http_errors': 0,
        }

    def handle(self, error: Exception, context: ErrorContext) -> FeedFailure:
        """
        Convert an error into a FeedFailure.

        Args:
            error: The error raised while querying the feed.
            context: Context information about the error.

        Returns:
            FeedFailure describing the error.
        """
        if isinstance(error, FeedError):
            return self.handle_http_error(error, context)
        if isinstance(error, requests.exceptions.SSLError):
            return self.handle_ssl_error(error, context)
        return self.handle_network_error(error, context)

    def handle_http_error(self, error: FeedError, context: ErrorContext) -> FeedFailure:
        """
        Handle a non-2xx response.

        Args:
            error: The FeedError carrying the status code.
            context: Context information about the error.

        Returns:
            FeedFailure carrying the status code.
        """
        with self._lock:
            self._error_stats['http_errors'] += 1
            self._http_failed_urls.add(context.url)

        logger.warning(
            f"HTTP error for {context.source.name} at {context.url}: "
            f"status {error.status_code}"
        )
        return FeedFailure(
            source=context.source,
            url=context.url,
            reason=str(error),
            status_code=error.status_code
        )

    def handle_ssl_error(self, error: Exception, context: ErrorContext) -> FeedFailure:
        """
        Handle an SSL certificate validation error.

        Args:
            error: The SSL error that occurred.
            context: Context information about the error.

        Returns:
            FeedFailure without a status code.
        """
        with self._lock:
            self._error_stats['ssl_errors'] += 1
            self._ssl_failed_urls.add(context.url)

        logger.warning(f"SSL error for {context.source.name} at {context.url}: {error}")
        return FeedFailure(
            source=context.source,
            url=context.url,
            reason=f"SSL error: {error}"
        )

    def handle_network_error(self, error: Exception, context: ErrorContext) -> FeedFailure:
        """
        Handle connection errors, timeouts and other transport failures.

        Args:
            error: The network error that occurred.
            context: Context information about the error.

        Returns:
            FeedFailure without a status code.
        """
        with self._lock:
            self._error_stats['network_errors'] += 1
            self._network_failed_urls.add(context.url)

        error_type = type(error).__name__
        logger.warning(
            f"Network error for {context.source.name} at {context.url}: "
            f"{error_type}: {error}"
        )
        return FeedFailure(
            source=context.source,
            url=context.url,
            reason=f"{error_type}: {error}"
        )

    def get_error_statistics(self) -> Dict[str, Any]:
        """
        Get error handling statistics.

        Returns:
            Dictionary containing error statistics.
        """
        with self._lock:
            return {
                'error_counts': self._error_stats.copy(),
                'failed_urls': {
                    'ssl_failed': sorted(self._ssl_failed_urls),
                    'network_failed': sorted(self._network_failed_urls),
                    'http_failed': sorted(self._http_failed_urls)
                },
                'total_failed_urls': len(
                    self._ssl_failed_urls | self._network_failed_urls | self._http_failed_urls
                )
            }

    def reset_statistics(self) -> None:
        """Reset error handling statistics."""
        with self._lock:
            for key in self._error_stats:
                self._error_stats[key] = 0
            self._ssl_failed_urls.clear()
            self._network_failed_urls.clear()
            self._http_failed_urls.clear()
