"""Tests for the line diff engine."""

from __future__ import annotations

from promptlab.version.diff_engine import DiffEngine, split_lines


def _shape(chunks):
    return [(c.tag, c.old_start, c.old_end, c.new_start, c.new_end, c.lines) for c in chunks]


class TestSplitLines:
    """Tests for split_lines."""

    def test_keeps_terminators(self) -> None:
        assert split_lines("a\nb\n") == ["a\n", "b\n"]

    def test_trailing_line_without_newline(self) -> None:
        assert split_lines("a\nb") == ["a\n", "b"]

    def test_empty(self) -> None:
        assert split_lines("") == []

    def test_crlf_stays_in_line(self) -> None:
        assert split_lines("a\r\nb\r\n") == ["a\r\n", "b\r\n"]

    def test_blank_lines(self) -> None:
        assert split_lines("\n\nx\n") == ["\n", "\n", "x\n"]


class TestComputeDiff:
    """Tests for DiffEngine.compute_diff."""

    def setup_method(self) -> None:
        self.engine = DiffEngine()

    def test_both_empty(self) -> None:
        assert self.engine.compute_diff("", "") == []

    def test_identical_is_single_equal_chunk(self) -> None:
        text = "one\ntwo\nthree\n"
        chunks = self.engine.compute_diff(text, text)

        assert _shape(chunks) == [("equal", 0, 3, 0, 3, ["one\n", "two\n", "three\n"])]

    def test_replacement_emits_delete_before_insert(self) -> None:
        chunks = self.engine.compute_diff("A\nB\nC\n", "A\nX\nC\n")

        assert _shape(chunks) == [
            ("equal", 0, 1, 0, 1, ["A\n"]),
            ("delete", 1, 2, 1, 1, ["B\n"]),
            ("insert", 2, 2, 1, 2, ["X\n"]),
            ("equal", 2, 3, 2, 3, ["C\n"]),
        ]

    def test_pure_insert_from_empty(self) -> None:
        chunks = self.engine.compute_diff("", "a\nb\n")

        assert _shape(chunks) == [("insert", 0, 0, 0, 2, ["a\n", "b\n"])]

    def test_pure_delete_to_empty(self) -> None:
        chunks = self.engine.compute_diff("a\nb\n", "")

        assert _shape(chunks) == [("delete", 0, 2, 0, 0, ["a\n", "b\n"])]

    def test_insert_in_middle(self) -> None:
        chunks = self.engine.compute_diff("a\nc\n", "a\nb\nc\n")

        assert _shape(chunks) == [
            ("equal", 0, 1, 0, 1, ["a\n"]),
            ("insert", 1, 1, 1, 2, ["b\n"]),
            ("equal", 1, 2, 2, 3, ["c\n"]),
        ]

    def test_multi_line_runs_are_merged(self) -> None:
        chunks = self.engine.compute_diff("a\nb\nc\nz\n", "x\ny\nz\n")

        assert [c.tag for c in chunks] == ["delete", "insert", "equal"]
        assert chunks[0].lines == ["a\n", "b\n", "c\n"]
        assert chunks[1].lines == ["x\n", "y\n"]
        assert (chunks[1].new_start, chunks[1].new_end) == (0, 2)
        assert (chunks[2].old_start, chunks[2].old_end, chunks[2].new_start, chunks[2].new_end) == (3, 4, 2, 3)

    def test_line_ending_change_is_a_difference(self) -> None:
        chunks = self.engine.compute_diff("a\n", "a\r\n")

        assert [c.tag for c in chunks] == ["delete", "insert"]

    def test_missing_final_newline_is_a_difference(self) -> None:
        chunks = self.engine.compute_diff("a\nb\n", "a\nb")

        assert _shape(chunks) == [
            ("equal", 0, 1, 0, 1, ["a\n"]),
            ("delete", 1, 2, 1, 1, ["b\n"]),
            ("insert", 2, 2, 1, 2, ["b"]),
        ]

    def test_chunks_cover_both_sides_without_gaps(self) -> None:
        old = "h\n1\n2\n3\nm\n4\nt\n"
        new = "h\n2\n3\nm\nX\nY\nt\nend\n"
        chunks = self.engine.compute_diff(old, new)

        old_cursor = new_cursor = 0
        for prev, chunk in zip([None] + chunks, chunks):
            assert prev is None or prev.tag != chunk.tag
            assert chunk.old_start == old_cursor
            assert chunk.new_start == new_cursor
            old_cursor, new_cursor = chunk.old_end, chunk.new_end

        assert old_cursor == len(split_lines(old))
        assert new_cursor == len(split_lines(new))
        rebuilt_old = "".join(l for c in chunks if c.tag != "insert" for l in c.lines)
        rebuilt_new = "".join(l for c in chunks if c.tag != "delete" for l in c.lines)
        assert rebuilt_old == old
        assert rebuilt_new == new


class TestSummaryAndRendering:
    """Tests for summarize and unified_diff."""

    def setup_method(self) -> None:
        self.engine = DiffEngine()

    def test_summarize_counts_lines(self) -> None:
        chunks = self.engine.compute_diff("A\nB\nC\n", "A\nX\nY\nC\n")

        assert self.engine.summarize(chunks) == {"chunks": 4, "equal": 2, "inserted": 2, "deleted": 1}

    def test_unified_diff(self) -> None:
        text = self.engine.unified_diff("A\nB\n", "A\nC\n", "0.1.0", "0.1.1")

        assert text.startswith("--- 0.1.0\n+++ 0.1.1\n")
        assert "-B\n" in text
        assert "+C\n" in text

    def test_unified_diff_identical_is_empty(self) -> None:
        assert self.engine.unified_diff("same\n", "same\n") == ""

    def test_unified_diff_marks_missing_newline(self) -> None:
        text = self.engine.unified_diff("a\n", "a")

        assert "+a\n\\ No newline at end of file\n" in text
