"""
Prompt version control: create, save, read, delete and diff prompts.

Coordinates the per-prompt store and the global index. Writes always land
in the prompt directory before the index is updated, so the index never
points at a version whose file is missing.
"""

from __future__ import annotations

import functools
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

from ..core.models import (
    DiffResult,
    IndexEntry,
    PromptData,
    PromptMeta,
    PromptMetaInput,
    PromptSummary,
    VersionInfo,
    utc_now,
)
from ..core.version_id import INITIAL_VERSION, next_version
from ..errors import (
    InvalidName,
    NoChange,
    NotFoundError,
    PromptExists,
    PromptNotFound,
    StorageError,
)
from ..storage import ensure_data_dir, is_valid_name
from ..storage.index import PromptIndex
from ..storage.prompt_store import PromptStore
from .diff_engine import DiffEngine

logger = logging.getLogger(__name__)

INITIAL_CONTENT = "# System\n\n# User\n\n# Rules\n"

_root_locks: Dict[Path, threading.RLock] = {}
_root_locks_guard = threading.Lock()


def _lock_for(root: Path) -> threading.RLock:
    """One lock per resolved data root, shared by all repositories in the process."""
    key = root.resolve()
    with _root_locks_guard:
        lock = _root_locks.get(key)
        if lock is None:
            lock = _root_locks[key] = threading.RLock()
        return lock


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class PromptRepository:
    """
    Versioned prompt storage rooted at one data directory.

    Keeps no cache: every call re-reads the index and prompt files. Calls
    are serialized per data root within this process only; separate
    processes sharing a root can lose updates.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.store = PromptStore(self.root)
        self.index = PromptIndex(self.root)
        self.diff_engine = DiffEngine()
        self._lock = _lock_for(self.root)

    def _require_entry(self, name: str) -> IndexEntry:
        entry = self.index.get(name)
        if entry is None:
            raise PromptNotFound(name)
        return entry

    @_locked
    def list_prompts(self) -> List[PromptSummary]:
        """All prompts, most recently updated first."""
        ensure_data_dir(self.root)
        prompts = [
            PromptSummary(name=name, latest=entry.latest, updated_at=entry.updated_at)
            for name, entry in self.index.read_all().items()
        ]
        prompts.sort(key=lambda p: p.updated_at, reverse=True)
        return prompts

    @_locked
    def get_prompt(self, name: str, version: Optional[str] = None) -> PromptData:
        """
        Read a prompt at one version.

        Args:
            name: Prompt name
            version: Version to read; the latest version when omitted

        Returns:
            Content, metadata and the resolved version

        Raises:
            PromptNotFound: no such prompt
            VersionNotFound: the requested version was never written
        """
        ensure_data_dir(self.root)
        if version is None:
            version = self._require_entry(name).latest
        elif not is_valid_name(name):
            raise PromptNotFound(name)

        meta = self.store.read_meta(name)
        content = self.store.read_content(name, version)
        return PromptData(content=content, meta=meta, version=version)

    @_locked
    def create_prompt(self, name: str, meta_input: PromptMetaInput) -> None:
        """
        Create a prompt with the initial template as version 0.1.0.

        Raises:
            PromptExists: the name is already in the index
            InvalidName: empty name or a name containing a path separator
        """
        ensure_data_dir(self.root)
        if self.index.get(name) is not None:
            raise PromptExists(name)
        if not is_valid_name(name):
            raise InvalidName(name)

        if self.store.exists(name):
            # Left behind by a create that failed before reaching the index.
            logger.debug("Removing orphaned directory for %s", name)
            self.store.delete(name)

        meta = PromptMeta.create(name, meta_input)
        self.store.write_meta(name, meta)
        self.store.write_content(name, INITIAL_VERSION, INITIAL_CONTENT)

        self.index.put(name, IndexEntry(
            latest=INITIAL_VERSION,
            created_at=meta.created_at,
            updated_at=meta.created_at,
        ))
        logger.debug("Created prompt %s", name)

    @_locked
    def save_prompt(self, name: str, content: str, meta_input: PromptMetaInput) -> str:
        """
        Save ``content`` as a new version of ``name``.

        Args:
            name: Prompt name
            content: Full new content
            meta_input: Replacement description, model and temperature

        Returns:
            The new version identifier

        Raises:
            PromptNotFound: no such prompt
            NoChange: content equals the latest version
            StorageError: the latest version could not be read or a write failed
        """
        ensure_data_dir(self.root)
        entry = self._require_entry(name)

        try:
            current = self.store.read_content(name, entry.latest)
        except NotFoundError as e:
            raise StorageError(
                f"Latest version {entry.latest} of '{name}' is missing on disk"
            ) from e
        if current == content:
            raise NoChange(name)

        new_version = next_version(entry.latest)
        # Files from a save that failed before the index update are never reused.
        written = set(self.store.list_versions(name))
        while new_version in written:
            new_version = next_version(new_version)
        meta = self.store.read_meta(name).merged(meta_input)

        self.store.write_content(name, new_version, content)
        self.store.write_meta(name, meta)

        self.index.put(name, IndexEntry(
            latest=new_version,
            created_at=entry.created_at,
            updated_at=utc_now(),
            tags=entry.tags,
        ))
        logger.debug("Saved %s as version %s", name, new_version)
        return new_version

    @_locked
    def delete_prompt(self, name: str) -> None:
        """Delete a prompt and all its versions; the index entry goes last."""
        ensure_data_dir(self.root)
        self._require_entry(name)
        self.store.delete(name)
        self.index.remove(name)
        logger.debug("Deleted prompt %s", name)

    @_locked
    def list_versions(self, name: str) -> List[VersionInfo]:
        """Versions of a prompt, highest first."""
        ensure_data_dir(self.root)
        if not is_valid_name(name):
            raise PromptNotFound(name)
        return self.store.version_infos(name)

    @_locked
    def diff_prompt(self, name: str, from_version: str, to_version: str) -> DiffResult:
        """
        Line diff between two versions of one prompt.

        Raises:
            PromptNotFound: invalid prompt name
            VersionNotFound: either version was never written
        """
        ensure_data_dir(self.root)
        if not is_valid_name(name):
            raise PromptNotFound(name)
        old_text = self.store.read_content(name, from_version)
        new_text = self.store.read_content(name, to_version)
        return DiffResult(
            from_version=from_version,
            to_version=to_version,
            chunks=self.diff_engine.compute_diff(old_text, new_text),
        )

    @_locked
    def set_tag(self, name: str, key: str, value: str) -> None:
        """Set a tag on a prompt's index entry."""
        entry = self._require_entry(name)
        tags = dict(entry.tags)
        tags[key] = value
        self.index.put(name, entry.model_copy(update={"tags": tags}))

    @_locked
    def remove_tag(self, name: str, key: str) -> None:
        """Remove a tag from a prompt's index entry; no-op if the tag is not set."""
        entry = self._require_entry(name)
        if key not in entry.tags:
            return
        tags = {k: v for k, v in entry.tags.items() if k != key}
        self.index.put(name, entry.model_copy(update={"tags": tags}))

    @_locked
    def get_tags(self, name: str) -> Dict[str, str]:
        return dict(self._require_entry(name).tags)
