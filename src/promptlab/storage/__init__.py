"""
On-disk layout of the prompt data root.

    <root>/
        index.json          global index, name -> IndexEntry
        prompts/
            <name>/
                meta.json   PromptMeta
                0.1.0.md    one immutable file per version
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from ..errors import StorageError

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"
PROMPTS_DIRNAME = "prompts"
META_FILENAME = "meta.json"
CONTENT_SUFFIX = ".md"


def index_path(root: Path) -> Path:
    return Path(root) / INDEX_FILENAME


def prompts_dir(root: Path) -> Path:
    return Path(root) / PROMPTS_DIRNAME


def is_valid_name(name: str) -> bool:
    """A prompt name must be usable as a single directory name."""
    if not name or name in (".", ".."):
        return False
    return "/" not in name and "\\" not in name


def ensure_data_dir(root: Path) -> None:
    """Create the data root, the prompts directory and an empty index if missing."""
    try:
        prompts_dir(root).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Could not create data directory {root}: {e}") from e

    path = index_path(root)
    if not path.exists():
        logger.debug("Initializing empty index at %s", path)
        atomic_write_text(path, "{}")


def read_text(path: Path) -> str:
    """
    Read a UTF-8 file without newline translation.

    OSError propagates to the caller; undecodable bytes and unusable paths
    raise StorageError.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except ValueError as e:
        raise StorageError(f"Could not read {path}: {e}") from e


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace ``path`` with ``text`` via a temporary file in the same directory.

    Readers see either the old file or the new one, never a partial write.
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except (OSError, ValueError) as e:
        raise StorageError(f"Could not write {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except (OSError, ValueError) as e:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise StorageError(f"Could not write {path}: {e}") from e


__all__ = [
    "CONTENT_SUFFIX",
    "INDEX_FILENAME",
    "META_FILENAME",
    "PROMPTS_DIRNAME",
    "atomic_write_text",
    "ensure_data_dir",
    "index_path",
    "is_valid_name",
    "prompts_dir",
    "read_text",
]
