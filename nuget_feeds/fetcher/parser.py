"""
Entry extraction for NuGet OData feed responses.

Feed bodies are scanned with patterns rather than parsed as XML: servers in
the wild return loosely formed documents, and only two pieces of each entry
are needed. Two entry shapes are recognised:

- search results, where the entry id carries ``Id='..'`` and ``Version='..'``
  key attributes (``.../Packages(Id='Foo',Version='1.0')``);
- update results, where the entry properties carry ``<d:Id>..</d:Id>`` and
  ``<d:Version>..</d:Version>`` elements.
"""

import logging
import re
from enum import Enum
from typing import Iterator, List, Optional, Pattern, Tuple

from nuget_feeds.core.interfaces import Candidate


logger = logging.getLogger(__name__)

ENTRY_PATTERN = re.compile(r"<entry\b[^>]*>([\s\S]*?)</entry>")


def _element_pattern(name: str) -> Pattern:
    # Values may be wrapped in single quotes and the element may carry attributes.
    return re.compile(rf"<d:{name}(?:\s[^>]*)?>\s*'?([^<>']+)'?\s*</d:{name}>")


class EntryShape(Enum):
    """
    Supported entry shapes.
    """
    SEARCH = (
        re.compile(r"\bId='([^<>']+)'"),
        re.compile(r"\bVersion='([^<>']+)'"),
    )
    UPDATE = (
        _element_pattern("Id"),
        _element_pattern("Version"),
    )

    @property
    def id_pattern(self) -> Pattern:
        return self.value[0]

    @property
    def version_pattern(self) -> Pattern:
        return self.value[1]


def iter_entry_blocks(body: str) -> Iterator[str]:
    """Yield the inner text of every ``<entry>`` block in document order."""
    for match in ENTRY_PATTERN.finditer(body or ""):
        yield match.group(1)


def extract_entry(block: str, shape: EntryShape) -> Optional[Tuple[str, str]]:
    """
    Extract the (id, version) pair of one entry block.

    Returns:
        The pair, or None if the block does not match the shape.
    """
    id_match = shape.id_pattern.search(block)
    version_match = shape.version_pattern.search(block)
    if not id_match or not version_match:
        return None

    package_id = id_match.group(1).strip()
    version = version_match.group(1).strip()
    if not package_id or not version:
        return None
    return package_id, version


def parse_entries(body: str, shape: EntryShape) -> List[Candidate]:
    """
    Extract candidates from a feed response body.

    Blocks that do not match the shape are skipped.

    Args:
        body: Raw response text.
        shape: Entry shape expected in the response.

    Returns:
        Candidates in document order, duplicates included.
    """
    candidates = []
    skipped = 0
    for block in iter_entry_blocks(body):
        pair = extract_entry(block, shape)
        if pair is None:
            skipped += 1
            continue
        candidates.append(Candidate.from_raw(*pair))

    if skipped:
        logger.debug(f"Skipped {skipped} {shape.name.lower()} entries without id or version")
    return candidates
