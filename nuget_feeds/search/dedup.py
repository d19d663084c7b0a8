"""
Per-source deduplication of feed candidates.
"""

from typing import Dict, Iterable

from nuget_feeds.core.interfaces import Candidate


def deduplicate(candidates: Iterable[Candidate]) -> Dict[str, Candidate]:
    """
    Keep one candidate per package id.

    The highest version wins; on equal versions the candidate seen first is
    kept. Ids keep the order in which they were first seen.

    Args:
        candidates: Candidates from a single source.

    Returns:
        Mapping from package id to the surviving candidate.
    """
    survivors: Dict[str, Candidate] = {}
    for candidate in candidates:
        stored = survivors.get(candidate.id)
        if stored is not None and stored.version_key >= candidate.version_key:
            continue
        survivors[candidate.id] = candidate
    return survivors
