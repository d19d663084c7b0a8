"""
Pytest configuration and fixtures for nuget-feeds tests.
"""

import tempfile
from typing import Dict, Union
from unittest.mock import Mock

import pytest

from nuget_feeds.core.interfaces import FeedConfig, FeedFailure, ManagerSource
from nuget_feeds.fetcher.querier import SourceQuerier


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def feed_config():
    """Create a test feed configuration."""
    return FeedConfig(
        user_agent="nuget-feeds-tests/1.0",
        request_timeout=5,  # Shorter timeout
        max_workers=1
    )


@pytest.fixture
def source_a():
    return ManagerSource(name="feed-a", url="https://feed-a.example.com/api/v2")


@pytest.fixture
def source_b():
    return ManagerSource(name="feed-b", url="https://feed-b.example.com/api/v2/")


@pytest.fixture
def make_querier(feed_config):
    """
    Build a querier mock whose answers are looked up by source name.

    Values are response bodies or HTTP status codes; a status code turns
    into a FeedFailure.
    """
    def factory(responses: Dict[str, Union[str, int]], config: FeedConfig = None):
        querier = Mock(spec=SourceQuerier)
        querier.config = config or feed_config

        def answer(source, *args, **kwargs):
            value = responses[source.name]
            if isinstance(value, int):
                return FeedFailure(
                    source=source,
                    url=f"{source.base_url}/mock",
                    reason=f"Unexpected status code {value}",
                    status_code=value
                )
            return value

        querier.search.side_effect = answer
        querier.check_updates.side_effect = answer
        return querier

    return factory


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Keep user environment overrides out of the tests."""
    for name in (
        "NUGET_FEEDS_CONFIG",
        "NUGET_FEEDS_USER_AGENT",
        "NUGET_FEEDS_TIMEOUT",
        "NUGET_FEEDS_MAX_WORKERS",
        "NUGET_FEEDS_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NUGET_FEEDS_LOG_LEVEL", "DEBUG")


# Pytest markers for test categorization
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
