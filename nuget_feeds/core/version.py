"""
Version ordering for feed entries.

Feed versions are externally controlled and only loosely follow NuGet's
semantic versioning, so parsing never fails: numeric segments compare
numerically, text segments after a number compare lexically and sort after
numbers, and empty input or input without any number sorts below every real
version.
"""

import functools
import re
from typing import Optional, Tuple

# A segment is (0, int) for numbers and (1, str) for text so that plain tuple
# comparison puts every number before every word.
Segment = Tuple[int, object]

_ZERO: Segment = (0, 0)
_SEPARATORS = re.compile(r"[._]")


def _parse_segment(chunk: str) -> Segment:
    if chunk.isascii() and chunk.isdigit():
        return (0, int(chunk))
    return (1, chunk.lower())


def _parse_segments(text: str) -> Tuple[Segment, ...]:
    return tuple(_parse_segment(chunk) for chunk in _SEPARATORS.split(text) if chunk)


@functools.total_ordering
class VersionKey:
    """
    Comparable form of a version string.

    ``1.0`` and ``1.0.0`` are equal, ``1.10`` is greater than ``1.9`` and a
    prerelease such as ``2.0-beta`` sorts before ``2.0``.
    """

    __slots__ = ("raw", "_key")

    def __init__(self, raw: str, key: tuple):
        self.raw = raw
        self._key = key

    @classmethod
    def parse(cls, raw: Optional[str]) -> "VersionKey":
        """
        Parse a version string. Never raises.

        Args:
            raw: Version string as found in a feed.

        Returns:
            VersionKey for the string.
        """
        text = (raw or "").strip()
        if text[:1] in ("v", "V") and text[1:2].isdigit():
            text = text[1:]
        text = text.split("+", 1)[0]

        if not text:
            return cls(raw or "", (0,))

        release_text, _, prerelease_text = text.partition("-")
        release = list(_parse_segments(release_text))
        if not any(kind == 0 for kind, _ in release):
            # No number at all, e.g. "unknown" or "latest".
            return cls(raw, (0,))
        while release and release[-1] == _ZERO:
            release.pop()

        if prerelease_text:
            # A prerelease sorts below the matching release.
            key = (1, tuple(release), 0, _parse_segments(prerelease_text))
        else:
            key = (1, tuple(release), 1, ())
        return cls(raw, key)

    @property
    def is_valid(self) -> bool:
        return self._key[0] == 1

    @property
    def is_prerelease(self) -> bool:
        return self.is_valid and self._key[2] == 0

    def __eq__(self, other):
        if not isinstance(other, VersionKey):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other):
        if not isinstance(other, VersionKey):
            return NotImplemented
        return self._key < other._key

    def __hash__(self):
        return hash(self._key)

    def __repr__(self):
        return f"VersionKey({self.raw!r})"

    def __str__(self):
        return self.raw


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if ``a`` is lower, 0 if equal, 1 if ``a`` is greater.
    """
    key_a = VersionKey.parse(a)
    key_b = VersionKey.parse(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0
