# What it does: Groups an edit list into hunks with surrounding context lines and renders them in unified diff syntax
# How it does: Walks the edits once. Consecutive edits whose gap is at most twice the context size share a hunk, since their context windows would overlap. Each hunk window is the first edit's start minus the context to the last edit's end plus the context, clamped to the sequence bounds
# What data structure it uses: List / Array (slices of the edit list, and the rendered body lines)

from .edit import changed_lines

DEFAULT_CONTEXT = 3

NO_NEWLINE = b'\\ No newline at end of file\n'


def format_range(prefix, begin, end):
    """
    Formats one side of a hunk header from a 0-based half-open range.

    An empty range is shown as the line before it (0 at the start of the
    file) followed by ",0". A single line omits the count.
    """
    count = end - begin
    if count == 0:
        return f"{prefix}{begin},0"
    if count == 1:
        return f"{prefix}{begin + 1}"
    return f"{prefix}{begin + 1},{count}"


def _render_line(prefix, sequence, index):
    line = sequence[index]
    if line.endswith(b'\n'):
        return prefix + line
    return prefix + line + b'\n' + NO_NEWLINE


class Hunk:
    """
    One @@ block of a patch: a window over both sequences plus the edits
    inside it.

    A hunk built without sequences stands for binary content. It carries no
    edits and renders to nothing, so callers can count hunks the same way
    for text and binary files.
    """

    def __init__(self, a, b, edits, begin_a, end_a, begin_b, end_b):
        self.a = a
        self.b = b
        self.edits = list(edits)
        self.begin_a = begin_a
        self.end_a = end_a
        self.begin_b = begin_b
        self.end_b = end_b

    @classmethod
    def binary(cls):
        return cls(None, None, [], 0, 0, 0, 0)

    @property
    def is_binary(self):
        return self.a is None

    @property
    def old_start(self): # Unified diff convention: 1-based, or the line before an empty range
        if self.end_a == self.begin_a:
            return self.begin_a
        return self.begin_a + 1

    @property
    def old_count(self):
        return self.end_a - self.begin_a

    @property
    def new_start(self):
        if self.end_b == self.begin_b:
            return self.begin_b
        return self.begin_b + 1

    @property
    def new_count(self):
        return self.end_b - self.begin_b

    @property
    def header(self):
        old_range = format_range('-', self.begin_a, self.end_a)
        new_range = format_range('+', self.begin_b, self.end_b)
        return f"@@ {old_range} {new_range} @@"

    def body_lines(self):
        if self.is_binary:
            return []
        lines = []
        a_cur = self.begin_a
        for edit in self.edits:
            while a_cur < edit.begin_a:
                lines.append(_render_line(b' ', self.a, a_cur))
                a_cur += 1
            for index in range(edit.begin_a, edit.end_a):
                lines.append(_render_line(b'-', self.a, index))
            for index in range(edit.begin_b, edit.end_b):
                lines.append(_render_line(b'+', self.b, index))
            a_cur = edit.end_a
        while a_cur < self.end_a:
            lines.append(_render_line(b' ', self.a, a_cur))
            a_cur += 1
        return lines

    def changed_text(self): # Removed and added lines of this hunk joined together, terminators included
        if self.is_binary:
            return b''
        return b''.join(changed_lines(self.a, self.b, self.edits))

    def to_bytes(self):
        if self.is_binary:
            return b''
        return (self.header + '\n').encode() + b''.join(self.body_lines())

    def __repr__(self):
        if self.is_binary:
            return 'Hunk(binary)'
        return f"Hunk({self.header}, edits={len(self.edits)})"


def _combines(current, following, context):
    return (following.begin_a - current.end_a <= 2 * context
            or following.begin_b - current.end_b <= 2 * context)


def build_hunks(edits, a, b, context=DEFAULT_CONTEXT): # Splits the edit list into hunks for sequences a and b
    if context < 0:
        raise ValueError("context must not be negative")

    hunks = []
    start = 0
    while start < len(edits):
        end = start
        while end + 1 < len(edits) and _combines(edits[end], edits[end + 1], context):
            end += 1

        first, last = edits[start], edits[end]
        hunks.append(Hunk(
            a, b, edits[start:end + 1],
            max(0, first.begin_a - context),
            min(len(a), last.end_a + context),
            max(0, first.begin_b - context),
            min(len(b), last.end_b + context),
        ))
        start = end + 1
    return hunks
