# Unit tests for utils/hunks.py

import pytest

from pitdiff.utils.edit import Edit
from pitdiff.utils.hunks import Hunk, build_hunks, format_range
from pitdiff.utils.myers import compute_edits
from pitdiff.utils.sequence import RawText


def numbered(count, replace=None):
    # Builds "1\n".."count\n", swapping in replacements by 1-based line number
    replace = replace or {}
    lines = [replace.get(n, str(n)) + "\n" for n in range(1, count + 1)]
    return RawText("".join(lines).encode())


class TestFormatRange:
    # Tests for hunks.format_range()

    def test_empty_range_at_start(self):
        assert format_range('-', 0, 0) == '-0,0'

    def test_empty_range_after_a_line(self):
        assert format_range('-', 5, 5) == '-5,0'

    def test_single_line_omits_count(self):
        assert format_range('+', 0, 1) == '+1'

    def test_several_lines(self):
        assert format_range('-', 3, 7) == '-4,4'


class TestBuildHunks:
    # Tests for hunks.build_hunks()

    def test_single_change_gets_three_lines_of_context(self):
        a = numbered(10)
        b = numbered(10, {5: "five"})
        hunks = build_hunks(compute_edits(a, b), a, b)

        assert len(hunks) == 1
        assert hunks[0].header == "@@ -2,7 +2,7 @@"
        assert hunks[0].body_lines() == [
            b" 2\n", b" 3\n", b" 4\n", b"-5\n", b"+five\n", b" 6\n", b" 7\n", b" 8\n",
        ]

    def test_context_is_clamped_at_file_edges(self):
        a = numbered(3)
        b = numbered(3, {1: "one"})
        hunk = build_hunks(compute_edits(a, b), a, b)[0]
        assert hunk.header == "@@ -1,3 +1,3 @@"

    def test_zero_context(self):
        a = numbered(10)
        b = numbered(10, {5: "five"})
        hunks = build_hunks(compute_edits(a, b), a, b, context=0)
        assert hunks[0].header == "@@ -5 +5 @@"
        assert hunks[0].body_lines() == [b"-5\n", b"+five\n"]

    def test_distant_edits_get_separate_hunks(self):
        a = numbered(20)
        b = numbered(20, {2: "two", 18: "eighteen"})
        hunks = build_hunks(compute_edits(a, b), a, b)
        assert [h.header for h in hunks] == ["@@ -1,5 +1,5 @@", "@@ -15,6 +15,6 @@"]

    def test_gap_of_twice_the_context_is_combined(self):
        # Edits at lines 3 and 10 leave six unchanged lines between them
        edits = [Edit(2, 3, 2, 3), Edit(9, 10, 9, 10)]
        a, b = numbered(20), numbered(20, {3: "x", 10: "y"})
        hunks = build_hunks(edits, a, b)
        assert len(hunks) == 1
        assert len(hunks[0].edits) == 2

    def test_gap_above_twice_the_context_is_split(self):
        edits = [Edit(2, 3, 2, 3), Edit(10, 11, 10, 11)]
        a, b = numbered(20), numbered(20, {3: "x", 11: "y"})
        assert len(build_hunks(edits, a, b)) == 2

    def test_no_edits_no_hunks(self):
        a = numbered(3)
        assert build_hunks([], a, a) == []

    def test_insertion_into_empty_file(self):
        a, b = RawText(b""), RawText(b"x\n")
        hunk = build_hunks(compute_edits(a, b), a, b)[0]
        assert hunk.header == "@@ -0,0 +1 @@"
        assert hunk.to_bytes() == b"@@ -0,0 +1 @@\n+x\n"

    def test_negative_context_rejected(self):
        with pytest.raises(ValueError):
            build_hunks([], [], [], context=-1)


class TestHunk:
    # Tests for rendering a single Hunk

    def test_missing_newline_marker(self):
        a, b = RawText(b"folder"), RawText(b"folder change")
        hunk = build_hunks(compute_edits(a, b), a, b)[0]
        assert hunk.to_bytes() == (
            b"@@ -1 +1 @@\n"
            b"-folder\n"
            b"\\ No newline at end of file\n"
            b"+folder change\n"
            b"\\ No newline at end of file\n"
        )

    def test_start_and_count(self):
        a = numbered(10)
        b = numbered(10, {5: "five"})
        hunk = build_hunks(compute_edits(a, b), a, b)[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (2, 7, 2, 7)

    def test_changed_text(self):
        a = numbered(10)
        b = numbered(10, {5: "five"})
        hunk = build_hunks(compute_edits(a, b), a, b)[0]
        assert hunk.changed_text() == b"5\nfive\n"

    def test_binary_hunk_is_empty(self):
        hunk = Hunk.binary()
        assert hunk.is_binary
        assert hunk.edits == []
        assert hunk.to_bytes() == b""
        assert hunk.changed_text() == b""
