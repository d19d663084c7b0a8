"""
Base classes for feed fetchers.

This module provides the HTTP plumbing shared by feed fetchers: session
creation, URL building and plain-text GET requests.
"""

import logging
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from nuget_feeds.core.exceptions import FeedError
from nuget_feeds.core.interfaces import FeedConfig


logger = logging.getLogger(__name__)

# urllib3 rejects zero timeouts.
MIN_TIMEOUT = 0.001


class FeedFetcher:
    """
    Base class for feed fetchers.

    This class owns the HTTP session used to talk to package feeds.
    """

    def __init__(self, config: Optional[FeedConfig] = None):
        """
        Initialize the feed fetcher.

        Args:
            config: Configuration for the fetcher. If None, uses default configuration.
        """
        self.config = config or FeedConfig()
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """
        Create a requests session for feed queries.

        Every feed call is a single request, so the adapter never retries.

        Returns:
            A configured requests session.
        """
        session = requests.Session()

        retry_strategy = Retry(total=0, raise_on_status=False)
        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_maxsize=max(self.config.max_workers, 1)
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers["User-Agent"] = self.config.user_agent
        session.verify = self.config.verify_ssl
        if self.config.proxy:
            session.proxies = {"http": self.config.proxy, "https": self.config.proxy}

        return session

    def close(self) -> None:
        """
        Close the session and drop its idle pooled connections.

        Requests already in flight are not interrupted; they end at their
        timeout. The session is shared by every call made through this
        fetcher, so concurrent calls lose their pooled connections too.
        """
        self.session.close()


class HttpFeedFetcher(FeedFetcher):
    """
    Base class for fetchers that read text bodies from HTTP feeds.
    """

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize the HTTP feed fetcher.

        Args:
            config: Configuration for the fetcher.
            headers: Optional headers to include in all requests.
        """
        super().__init__(config)
        self.headers = headers or {}

    def _fetch_text(self, url: str, timeout: Optional[float] = None) -> str:
        """
        Fetch a URL and return its body as text.

        Args:
            url: URL to fetch.
            timeout: Time left for the request in seconds. The configured
                timeout still caps it.

        Returns:
            Response body.

        Raises:
            FeedError: If the server answers with a non-2xx status.
            requests.exceptions.RequestException: If the request itself fails.
        """
        effective_timeout = self.config.request_timeout
        if timeout is not None:
            effective_timeout = min(effective_timeout, max(timeout, MIN_TIMEOUT))

        logger.debug(f"GET {url}")
        response = self.session.get(
            url,
            headers=self.headers,
            timeout=effective_timeout
        )
        if not 200 <= response.status_code < 300:
            raise FeedError(
                f"Unexpected status code {response.status_code}",
                url=url,
                status_code=response.status_code
            )
        return response.text
