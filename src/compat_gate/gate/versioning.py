"""Dotted client version parsing and comparison."""

from dataclasses import dataclass
from typing import List, Optional


def _parse_segment(segment: str) -> int:
    """Parse one version segment; anything that is not plain digits becomes 0."""
    segment = segment.strip()
    if segment.isascii() and segment.isdigit():
        return int(segment)
    return 0


def split_version(text: Optional[str]) -> List[int]:
    """Split a dotted version string into integer segments.

    Never raises. ``None`` and empty strings yield ``[0]``.
    """
    if not text:
        return [0]
    return [_parse_segment(part) for part in text.split(".")]


def compare_versions(current: Optional[str], other: Optional[str]) -> int:
    """Compare two dotted version strings segment by segment.

    The shorter version is zero-padded, so ``"2.1"`` equals ``"2.1.0"``.

    Args:
        current: Version being checked
        other: Version to compare against

    Returns:
        1 if current is newer, -1 if it is older, 0 if equal
    """
    left = split_version(current)
    right = split_version(other)

    for index in range(max(len(left), len(right))):
        a = left[index] if index < len(left) else 0
        b = right[index] if index < len(right) else 0
        if a > b:
            return 1
        if a < b:
            return -1
    return 0


def is_older_than(current: Optional[str], minimum: str) -> bool:
    """Return True when ``current`` sorts strictly below ``minimum``."""
    return compare_versions(current, minimum) < 0


@dataclass(frozen=True)
class Version:
    """Client version as a major.minor.patch triple."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: Optional[str]) -> "Version":
        """Build a version from a dotted string; extra segments are ignored."""
        parts = split_version(text) + [0, 0, 0]
        return cls(major=parts[0], minor=parts[1], patch=parts[2])

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
