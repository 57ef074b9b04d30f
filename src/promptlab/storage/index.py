"""
Global index: a single JSON file mapping prompt name to its IndexEntry.

Every mutation reads the whole file, changes it in memory and writes the
whole file back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import TypeAdapter, ValidationError

from ..core.models import IndexEntry
from ..errors import StorageError
from . import atomic_write_text, index_path, read_text

logger = logging.getLogger(__name__)

_INDEX_ADAPTER = TypeAdapter(Dict[str, IndexEntry])


class PromptIndex:
    """Catalog of existing prompts and their latest version."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.path = index_path(self.root)

    def read_all(self) -> Dict[str, IndexEntry]:
        """Load the full index; an absent file is an empty index."""
        try:
            raw = read_text(self.path)
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        try:
            return _INDEX_ADAPTER.validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Malformed index {self.path}: {e}") from e

    def write_all(self, entries: Dict[str, IndexEntry]) -> None:
        data = {name: entry.model_dump() for name, entry in entries.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create {self.path.parent}: {e}") from e
        atomic_write_text(self.path, json.dumps(data, indent=2, ensure_ascii=False))
        logger.debug("Wrote index with %d entries", len(data))

    def get(self, name: str) -> Optional[IndexEntry]:
        return self.read_all().get(name)

    def put(self, name: str, entry: IndexEntry) -> None:
        entries = self.read_all()
        entries[name] = entry
        self.write_all(entries)

    def remove(self, name: str) -> None:
        entries = self.read_all()
        if entries.pop(name, None) is None:
            return
        self.write_all(entries)
