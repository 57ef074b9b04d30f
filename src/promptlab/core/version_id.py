"""
Semantic-version style identifiers for prompt versions.

Identifiers are strict ``major.minor.patch`` triples. Anything else is
tolerated: it sorts as ``0.0.0`` and increments to the initial version.
"""

from __future__ import annotations

import re
from typing import Iterable, List, NamedTuple, Optional

INITIAL_VERSION = "0.1.0"

_VERSION_RE = re.compile(r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)")


class VersionId(NamedTuple):
    """Parsed version; tuple ordering gives the version order."""

    major: int
    minor: int
    patch: int

    def bump_patch(self) -> VersionId:
        return self._replace(patch=self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


ZERO_VERSION = VersionId(0, 0, 0)


def parse_version(text: str) -> Optional[VersionId]:
    """Parse ``text`` into a VersionId, or return None if it is not one."""
    match = _VERSION_RE.fullmatch(text)
    if not match:
        return None
    return VersionId(*(int(part) for part in match.groups()))


def version_sort_key(text: str) -> VersionId:
    return parse_version(text) or ZERO_VERSION


def sort_versions(versions: Iterable[str], descending: bool = True) -> List[str]:
    return sorted(versions, key=version_sort_key, reverse=descending)


def next_version(current: Optional[str]) -> str:
    """
    Compute the version that follows ``current``.

    Args:
        current: Latest version identifier, or None for a new prompt

    Returns:
        ``current`` with its patch component incremented, or
        INITIAL_VERSION when ``current`` is missing or unparsable
    """
    if current is None:
        return INITIAL_VERSION
    parsed = parse_version(current)
    if parsed is None:
        return INITIAL_VERSION
    return str(parsed.bump_patch())
