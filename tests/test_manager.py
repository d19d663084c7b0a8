"""
Tests for the NuGet manager facade.
"""

import threading
from unittest.mock import Mock

import pytest

from nuget_feeds.core.configuration import StaticSourcesHelper
from nuget_feeds.core.exceptions import ConfigurationError
from nuget_feeds.core.interfaces import (
    InstalledPackage, ManagerCapabilities, ManagerProperties, ManagerSource, Package
)
from nuget_feeds.core.manager import NuGetDetailsHelper, NuGetManager
from tests.fixtures.sample_feeds import feed, search_entry, update_entry


DEFAULT = ManagerSource(name="default", url="https://default.example.com/api/v2")


@pytest.fixture
def properties():
    return ManagerProperties(name="NuGet", default_source=DEFAULT)


class CustomDetailsHelper:
    def package_url(self, package):
        return "https://example.com"


class TestInitialize:
    """Test cases for manager initialization checks."""

    def test_valid_manager(self, properties, make_querier):
        manager = NuGetManager(properties, querier=make_querier({}))

        manager.initialize()

        assert manager.name == "NuGet"

    def test_reassigned_details_helper(self, properties, make_querier):
        manager = NuGetManager(properties, details_helper=CustomDetailsHelper(), querier=make_querier({}))

        with pytest.raises(ConfigurationError, match="package details provider"):
            manager.initialize()

    def test_details_helper_subclass_is_accepted(self, properties, make_querier):
        class SubclassedHelper(NuGetDetailsHelper):
            pass

        NuGetManager(properties, details_helper=SubclassedHelper(), querier=make_querier({})).initialize()

    def test_custom_versions_required(self, properties, make_querier):
        capabilities = ManagerCapabilities(supports_custom_versions=False)
        manager = NuGetManager(properties, capabilities=capabilities, querier=make_querier({}))

        with pytest.raises(ConfigurationError, match="custom versions"):
            manager.initialize()

    def test_custom_icons_required(self, properties, make_querier):
        capabilities = ManagerCapabilities(supports_custom_package_icons=False)
        manager = NuGetManager(properties, capabilities=capabilities, querier=make_querier({}))

        with pytest.raises(ConfigurationError, match="package icons"):
            manager.initialize()

    def test_default_source_required_without_custom_sources(self, make_querier):
        capabilities = ManagerCapabilities(supports_custom_sources=False)
        manager = NuGetManager(ManagerProperties(), capabilities=capabilities, querier=make_querier({}))

        with pytest.raises(ConfigurationError, match="default source"):
            manager.initialize()

    def test_operations_initialize_lazily(self, make_querier):
        manager = NuGetManager(
            ManagerProperties(),
            capabilities=ManagerCapabilities(supports_custom_versions=False),
            querier=make_querier({})
        )

        with pytest.raises(ConfigurationError):
            manager.find_packages("foo")
        with pytest.raises(ConfigurationError):
            manager.get_available_updates()


class TestSources:

    def test_configured_sources(self, properties, make_querier, source_a, source_b):
        manager = NuGetManager(
            properties,
            sources_helper=StaticSourcesHelper([source_a, source_b]),
            querier=make_querier({})
        )

        assert manager.get_sources() == [source_a, source_b]

    def test_default_source_without_custom_sources(self, properties, make_querier, source_a):
        manager = NuGetManager(
            properties,
            capabilities=ManagerCapabilities(supports_custom_sources=False),
            sources_helper=StaticSourcesHelper([source_a]),
            querier=make_querier({})
        )

        assert manager.get_sources() == [DEFAULT]

    def test_default_source_without_helper(self, properties, make_querier):
        assert NuGetManager(properties, querier=make_querier({})).get_sources() == [DEFAULT]

    def test_no_sources_at_all(self, make_querier):
        assert NuGetManager(ManagerProperties(), querier=make_querier({})).get_sources() == []


class TestOperations:
    """Test cases for find_packages and get_available_updates."""

    def test_find_packages(self, properties, make_querier, source_a):
        querier = make_querier({"feed-a": feed(search_entry("Polly", "8.2.0"))})
        manager = NuGetManager(properties, sources_helper=StaticSourcesHelper([source_a]), querier=querier)

        packages = manager.find_packages("polly")

        assert [(p.name, p.id, p.version) for p in packages] == [("Polly", "Polly", "8.2.0")]
        assert packages[0].manager is manager
        querier.search.assert_called_once()
        assert querier.search.call_args.args[:2] == (source_a, "polly")

    def test_find_packages_uses_default_source(self, properties, make_querier):
        querier = make_querier({"default": feed(search_entry("Polly", "8.2.0"))})
        manager = NuGetManager(
            properties,
            capabilities=ManagerCapabilities(supports_custom_sources=False),
            querier=querier
        )

        packages = manager.find_packages("polly")

        assert packages[0].source == DEFAULT

    def test_find_packages_cancelled(self, properties, make_querier, source_a):
        querier = make_querier({"feed-a": feed(search_entry("Polly", "8.2.0"))})
        manager = NuGetManager(properties, sources_helper=StaticSourcesHelper([source_a]), querier=querier)
        cancel = threading.Event()
        cancel.set()

        assert manager.find_packages("polly", cancel_event=cancel) == []

    def test_get_available_updates(self, properties, make_querier, source_a):
        provider = Mock(return_value=[InstalledPackage(id="Polly", version="7.2.4", source=source_a)])
        querier = make_querier({"feed-a": feed(update_entry("Polly", "8.2.0"))})
        manager = NuGetManager(properties, installed_provider=provider, querier=querier)

        packages = manager.get_available_updates()

        provider.assert_called_once_with()
        assert [(p.id, p.installed_version, p.version) for p in packages] == [("Polly", "7.2.4", "8.2.0")]
        assert packages[0].manager is manager

    def test_get_available_updates_without_provider(self, properties, make_querier):
        querier = make_querier({})

        assert NuGetManager(properties, querier=querier).get_available_updates() == []
        querier.check_updates.assert_not_called()


class TestNuGetDetailsHelper:

    def test_package_url(self, source_b):
        package = Package(name="Polly", id="Polly", version="8.2.0", source=source_b)

        url = NuGetDetailsHelper().package_url(package)

        assert url == "https://feed-b.example.com/api/v2/Packages(Id='Polly',Version='8.2.0')"
