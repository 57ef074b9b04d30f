"""
Diff engine for comparing prompt versions line by line.

Produces maximal runs of equal, inserted and deleted lines with half-open
line ranges on both the old and the new side.
"""

from __future__ import annotations

import difflib
import re
from enum import Enum
from typing import Dict, Iterator, List, Tuple

from ..core.models import DiffChunk

_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


class DiffTag(Enum):
    """Kinds of line change."""
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


def split_lines(text: str) -> List[str]:
    """
    Split text after every newline, keeping the terminators.

    A trailing line without a newline is kept as its own line. Carriage
    returns stay part of the line, so CRLF and LF versions of the same text
    compare as different lines.
    """
    return _LINE_RE.findall(text)


class DiffEngine:
    """
    Line-based diff between two texts.

    Uses difflib's SequenceMatcher for the edit script. A replaced block is
    reported as its deleted lines followed by its inserted lines.
    """

    def _changes(self, old_lines: List[str], new_lines: List[str]) -> Iterator[Tuple[DiffTag, str]]:
        """Yield (tag, line) for every line of both inputs in document order."""
        matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == 'equal':
                for line in old_lines[i1:i2]:
                    yield DiffTag.EQUAL, line
            elif tag == 'delete':
                for line in old_lines[i1:i2]:
                    yield DiffTag.DELETE, line
            elif tag == 'insert':
                for line in new_lines[j1:j2]:
                    yield DiffTag.INSERT, line
            elif tag == 'replace':
                for line in old_lines[i1:i2]:
                    yield DiffTag.DELETE, line
                for line in new_lines[j1:j2]:
                    yield DiffTag.INSERT, line

    def compute_diff(self, old_text: str, new_text: str) -> List[DiffChunk]:
        """
        Diff two texts into chunks.

        Args:
            old_text: Content of the earlier version
            new_text: Content of the later version

        Returns:
            Chunks in document order; no two neighbours share a tag
        """
        chunks: List[DiffChunk] = []
        old_line = 0
        new_line = 0

        for tag, line in self._changes(split_lines(old_text), split_lines(new_text)):
            advance_old = tag is not DiffTag.INSERT
            advance_new = tag is not DiffTag.DELETE

            last = chunks[-1] if chunks else None
            if last is None or last.tag != tag.value:
                last = DiffChunk(
                    tag=tag.value,
                    old_start=old_line,
                    old_end=old_line,
                    new_start=new_line,
                    new_end=new_line,
                )
                chunks.append(last)

            last.lines.append(line)
            if advance_old:
                old_line += 1
                last.old_end = old_line
            if advance_new:
                new_line += 1
                last.new_end = new_line

        return chunks

    def summarize(self, chunks: List[DiffChunk]) -> Dict[str, int]:
        """Count lines per tag across ``chunks``."""
        summary = {"chunks": len(chunks), "equal": 0, "inserted": 0, "deleted": 0}
        for chunk in chunks:
            if chunk.tag == DiffTag.EQUAL.value:
                summary["equal"] += len(chunk.lines)
            elif chunk.tag == DiffTag.INSERT.value:
                summary["inserted"] += len(chunk.lines)
            elif chunk.tag == DiffTag.DELETE.value:
                summary["deleted"] += len(chunk.lines)
        return summary

    def unified_diff(
        self,
        old_text: str,
        new_text: str,
        from_label: str = "old",
        to_label: str = "new",
        context_lines: int = 3
    ) -> str:
        """
        Generate a unified text diff similar to git diff.

        Args:
            old_text: Content of the earlier version
            new_text: Content of the later version
            from_label: Header name for the earlier version
            to_label: Header name for the later version
            context_lines: Number of context lines to show

        Returns:
            Unified diff as string, empty when the texts are equal
        """
        diff_lines = difflib.unified_diff(
            split_lines(old_text),
            split_lines(new_text),
            fromfile=from_label,
            tofile=to_label,
            n=context_lines
        )
        return ''.join(
            line if line.endswith('\n') else line + '\n\\ No newline at end of file\n'
            for line in diff_lines
        )
