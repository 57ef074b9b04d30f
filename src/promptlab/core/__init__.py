"""
Core records, result types and version identifiers.
"""

from .models import (
    DiffChunk,
    DiffResult,
    IndexEntry,
    PromptData,
    PromptMeta,
    PromptMetaInput,
    PromptSummary,
    VersionInfo,
)
from .version_id import INITIAL_VERSION, VersionId, next_version, parse_version, sort_versions

__all__ = [
    "DiffChunk",
    "DiffResult",
    "IndexEntry",
    "PromptData",
    "PromptMeta",
    "PromptMetaInput",
    "PromptSummary",
    "VersionInfo",
    "INITIAL_VERSION",
    "VersionId",
    "next_version",
    "parse_version",
    "sort_versions",
]
