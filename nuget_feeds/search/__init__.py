"""
Search and update discovery across feed sources.
"""

from .dedup import deduplicate
from .engine import FeedSearchEngine
from .executor import SourceExecutor
from .updates import UpdateChecker, group_by_source

__all__ = [
    "deduplicate",
    "FeedSearchEngine",
    "SourceExecutor",
    "UpdateChecker",
    "group_by_source"
]
