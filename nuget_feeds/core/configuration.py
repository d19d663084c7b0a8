"""
Configuration management for nuget-feeds.

This module provides the ConfigurationManager class for loading feed settings
and configured sources from a YAML file, applying environment overrides, and
the config-backed SourcesHelper handed to the NuGet manager.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from nuget_feeds.core.exceptions import ConfigurationError
from nuget_feeds.core.interfaces import FeedConfig, ManagerProperties, ManagerSource


logger = logging.getLogger(__name__)

DEFAULT_SOURCE = ManagerSource(name="nuget.org", url="https://www.nuget.org/api/v2")

ENV_USER_AGENT = "NUGET_FEEDS_USER_AGENT"
ENV_TIMEOUT = "NUGET_FEEDS_TIMEOUT"
ENV_MAX_WORKERS = "NUGET_FEEDS_MAX_WORKERS"


class StaticSourcesHelper:
    """
    Sources helper backed by a fixed list of sources.
    """

    def __init__(self, sources: Optional[List[ManagerSource]] = None):
        self._sources = list(sources or [])

    def get_sources(self) -> List[ManagerSource]:
        return list(self._sources)

    def get_source(self, name: str) -> Optional[ManagerSource]:
        for source in self._sources:
            if source.name == name:
                return source
        return None

    def add_source(self, source: ManagerSource) -> None:
        if self.get_source(source.name) is not None:
            raise ConfigurationError(f"Source already configured: {source.name}")
        self._sources.append(source)


class ConfigurationManager:
    """
    Loads feed configuration for nuget-feeds.

    This class handles:
    - Loading the YAML configuration file, if any
    - Falling back to built-in defaults for missing keys
    - Applying environment variable overrides
    - Building the configured sources
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to a YAML configuration file. If None, only
                defaults and environment overrides are used.
        """
        self.config_path = Path(config_path).expanduser() if config_path else None
        self._raw: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """
        Load the raw configuration mapping.

        Returns:
            Dictionary with the file contents, empty if there is no file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        if self._raw is not None:
            return self._raw

        if self.config_path is None:
            self._raw = {}
            return self._raw

        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing configuration YAML: {e}")
        except IOError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {self.config_path}")

        logger.debug(f"Loaded configuration from {self.config_path}")
        self._raw = data
        return self._raw

    def get_feed_config(self) -> FeedConfig:
        """
        Build the feed configuration.

        Raises:
            ConfigurationError: If a value has the wrong type.
        """
        raw = self.load()
        defaults = FeedConfig()

        user_agent = os.getenv(ENV_USER_AGENT) or raw.get("user_agent", defaults.user_agent)
        request_timeout = self._int_setting(
            os.getenv(ENV_TIMEOUT) or raw.get("request_timeout", defaults.request_timeout),
            "request_timeout"
        )
        max_workers = self._int_setting(
            os.getenv(ENV_MAX_WORKERS) or raw.get("max_workers", defaults.max_workers),
            "max_workers"
        )
        if request_timeout <= 0:
            raise ConfigurationError(f"request_timeout must be positive, got {request_timeout}")
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")

        return FeedConfig(
            user_agent=str(user_agent),
            request_timeout=request_timeout,
            max_workers=max_workers,
            verify_ssl=self._bool_setting(raw.get("verify_ssl", defaults.verify_ssl), "verify_ssl"),
            proxy=raw.get("proxy", defaults.proxy),
        )

    def get_sources(self) -> List[ManagerSource]:
        """
        Build the configured sources. Defaults to nuget.org.
        """
        raw = self.load()
        entries = raw.get("sources")
        if entries is None:
            return [DEFAULT_SOURCE]
        if not isinstance(entries, list):
            raise ConfigurationError("'sources' must be a list")
        return [self._source_from_dict(entry) for entry in entries]

    def get_manager_properties(self) -> ManagerProperties:
        raw = self.load()
        manager = raw.get("manager") or {}
        if not isinstance(manager, dict):
            raise ConfigurationError("'manager' must be a mapping")

        default_source = DEFAULT_SOURCE
        if manager.get("default_source") is not None:
            default_source = self._source_from_dict(manager["default_source"])

        return ManagerProperties(
            name=manager.get("name", "NuGet"),
            display_name=manager.get("display_name"),
            default_source=default_source,
            known_sources=self.get_sources(),
        )

    def get_sources_helper(self) -> StaticSourcesHelper:
        return StaticSourcesHelper(self.get_sources())

    def _source_from_dict(self, entry: Any) -> ManagerSource:
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("url"):
            raise ConfigurationError(f"Source entries need a name and a url, got: {entry!r}")
        return ManagerSource(name=str(entry["name"]), url=str(entry["url"]))

    @staticmethod
    def _bool_setting(value: Any, key: str) -> bool:
        if not isinstance(value, bool):
            raise ConfigurationError(f"{key} must be true or false, got {value!r}")
        return value

    @staticmethod
    def _int_setting(value: Any, key: str) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be an integer, got {value!r}")
