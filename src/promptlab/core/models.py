"""
Records persisted by the prompt store and the values returned to callers.

Persisted records are pydantic models so they serialize to and from the
JSON files under the data root. Result types handed back to the caller are
plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, Field


def utc_now() -> str:
    """Current time as an ISO-8601 string with a UTC offset."""
    return datetime.now(timezone.utc).isoformat()


class PromptMetaInput(BaseModel):
    """User-editable metadata supplied on create and save."""

    description: str = ""
    model: str = ""
    temperature: float = 0.7


class PromptMeta(BaseModel):
    """Metadata record stored as ``meta.json`` beside the version files."""

    name: str
    description: str = ""
    model: str = ""
    temperature: float = 0.7
    created_at: str

    @classmethod
    def create(cls, name: str, meta_input: PromptMetaInput) -> PromptMeta:
        return cls(
            name=name,
            description=meta_input.description,
            model=meta_input.model,
            temperature=meta_input.temperature,
            created_at=utc_now(),
        )

    def merged(self, meta_input: PromptMetaInput) -> PromptMeta:
        """Return a copy with the editable fields replaced; name and created_at are kept."""
        return self.model_copy(update={
            "description": meta_input.description,
            "model": meta_input.model,
            "temperature": meta_input.temperature,
        })


class IndexEntry(BaseModel):
    """Summary of one prompt in the global index."""

    latest: str
    created_at: str
    updated_at: str
    tags: Dict[str, str] = Field(default_factory=dict)


@dataclass
class PromptSummary:
    """Row returned by ``list_prompts``."""

    name: str
    latest: str
    updated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "latest": self.latest, "updated_at": self.updated_at}


@dataclass
class PromptData:
    """A prompt's content at one version together with its metadata."""

    content: str
    meta: PromptMeta
    version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "meta": self.meta.model_dump(),
            "version": self.version,
        }


@dataclass
class VersionInfo:
    """A version identifier and when its file was written."""

    version: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "created_at": self.created_at}


@dataclass
class DiffChunk:
    """A maximal run of lines sharing one tag: equal, insert or delete."""

    tag: str
    old_start: int
    old_end: int
    new_start: int
    new_end: int
    lines: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "old_start": self.old_start,
            "old_end": self.old_end,
            "new_start": self.new_start,
            "new_end": self.new_end,
            "lines": list(self.lines),
        }


@dataclass
class DiffResult:
    """Diff between two versions of one prompt."""

    from_version: str
    to_version: str
    chunks: List[DiffChunk] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_version": self.from_version,
            "to_version": self.to_version,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
        }
