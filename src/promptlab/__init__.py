"""
promptlab: a local, file-backed store of versioned prompts.
"""

from .core.models import (
    DiffChunk,
    DiffResult,
    IndexEntry,
    PromptData,
    PromptMeta,
    PromptMetaInput,
    PromptSummary,
    VersionInfo,
)
from .errors import (
    InvalidName,
    NoChange,
    NotFoundError,
    PromptExists,
    PromptLabError,
    PromptNotFound,
    StorageError,
    VersionExists,
    VersionNotFound,
)
from .version import DiffEngine, PromptRepository

__version__ = "0.1.0"

__all__ = [
    "DiffChunk",
    "DiffEngine",
    "DiffResult",
    "IndexEntry",
    "InvalidName",
    "NoChange",
    "NotFoundError",
    "PromptData",
    "PromptExists",
    "PromptLabError",
    "PromptMeta",
    "PromptMetaInput",
    "PromptNotFound",
    "PromptRepository",
    "PromptSummary",
    "StorageError",
    "VersionExists",
    "VersionInfo",
    "VersionNotFound",
]
