"""
Per-prompt persistence: one directory per prompt holding its metadata and
one immutable content file per version.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from pydantic import ValidationError

from ..core.models import PromptMeta, VersionInfo
from ..core.version_id import sort_versions, version_sort_key
from ..errors import (
    InvalidName,
    PromptNotFound,
    StorageError,
    VersionExists,
    VersionNotFound,
)
from . import (
    CONTENT_SUFFIX,
    META_FILENAME,
    atomic_write_text,
    is_valid_name,
    prompts_dir,
    read_text,
)

logger = logging.getLogger(__name__)


class PromptStore:
    """
    Reads and writes prompt directories under ``<root>/prompts``.

    Holds no state besides the root path; every call goes to disk.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def prompt_dir(self, name: str) -> Path:
        if not is_valid_name(name):
            raise InvalidName(name)
        return prompts_dir(self.root) / name

    def exists(self, name: str) -> bool:
        return is_valid_name(name) and self.prompt_dir(name).is_dir()

    def _version_path(self, name: str, version: str) -> Path:
        if not is_valid_name(version):
            raise VersionNotFound(name, version)
        return self.prompt_dir(name) / f"{version}{CONTENT_SUFFIX}"

    def _ensure_prompt_dir(self, name: str) -> Path:
        directory = self.prompt_dir(name)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not create directory for '{name}': {e}") from e
        return directory

    # Metadata

    def read_meta(self, name: str) -> PromptMeta:
        meta_path = self.prompt_dir(name) / META_FILENAME
        try:
            raw = read_text(meta_path)
        except FileNotFoundError as e:
            raise PromptNotFound(name) from e
        except OSError as e:
            raise StorageError(f"Could not read {meta_path}: {e}") from e

        try:
            return PromptMeta.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Malformed metadata in {meta_path}: {e}") from e

    def write_meta(self, name: str, meta: PromptMeta) -> None:
        directory = self._ensure_prompt_dir(name)
        atomic_write_text(directory / META_FILENAME, meta.model_dump_json(indent=2))
        logger.debug("Wrote metadata for %s", name)

    # Content

    def read_content(self, name: str, version: str) -> str:
        path = self._version_path(name, version)
        try:
            return read_text(path)
        except FileNotFoundError as e:
            raise VersionNotFound(name, version) from e
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def write_content(self, name: str, version: str, content: str) -> None:
        """
        Write the content file for a new version.

        Version files are immutable: writing a version that already exists
        raises VersionExists instead of replacing it.
        """
        if not is_valid_name(version):
            raise StorageError(f"Invalid version identifier: {version!r}")
        directory = self._ensure_prompt_dir(name)
        path = directory / f"{version}{CONTENT_SUFFIX}"
        try:
            f = open(path, "x", encoding="utf-8", newline="")
        except FileExistsError as e:
            raise VersionExists(name, version) from e
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not write {path}: {e}") from e

        try:
            with f:
                f.write(content)
        except (OSError, ValueError) as e:
            # A partial file would be listed as a real version.
            with contextlib.suppress(OSError):
                os.unlink(path)
            raise StorageError(f"Could not write {path}: {e}") from e
        logger.debug("Wrote %s version %s (%d chars)", name, version, len(content))

    # Versions

    def _version_files(self, name: str) -> List[Path]:
        directory = self.prompt_dir(name)
        try:
            return [
                entry for entry in directory.iterdir()
                if entry.is_file()
                and entry.name.endswith(CONTENT_SUFFIX)
                and not entry.name.startswith(".")
            ]
        except OSError as e:
            raise StorageError(f"Could not list versions of '{name}': {e}") from e

    def list_versions(self, name: str) -> List[str]:
        """Version identifiers of ``name``, newest first; empty if the prompt has no directory."""
        if not self.exists(name):
            return []
        versions = [path.name[: -len(CONTENT_SUFFIX)] for path in self._version_files(name)]
        return sort_versions(versions)

    def version_infos(self, name: str) -> List[VersionInfo]:
        """
        Versions of ``name`` with the modification time of each file.

        Raises:
            PromptNotFound: the prompt has no directory
        """
        if not self.exists(name):
            raise PromptNotFound(name)

        infos = []
        for path in self._version_files(name):
            try:
                mtime = path.stat().st_mtime
            except OSError as e:
                raise StorageError(f"Could not stat {path}: {e}") from e
            infos.append(VersionInfo(
                version=path.name[: -len(CONTENT_SUFFIX)],
                created_at=datetime.fromtimestamp(mtime, timezone.utc).isoformat(),
            ))

        infos.sort(key=lambda info: version_sort_key(info.version), reverse=True)
        return infos

    def delete(self, name: str) -> None:
        """Remove the prompt directory with all its files; no-op if already absent."""
        directory = self.prompt_dir(name)
        if not directory.exists():
            return
        try:
            shutil.rmtree(directory)
        except OSError as e:
            raise StorageError(f"Could not delete '{name}': {e}") from e
        logger.debug("Deleted directory %s", directory)
