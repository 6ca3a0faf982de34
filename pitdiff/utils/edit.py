# What it does: Defines a single edit (one contiguous change between two line sequences) and helpers over lists of edits
# How it does: An edit is a pair of half-open ranges, one into sequence A and one into sequence B. Its type is never stored, it is derived from which ranges are non-empty
# What data structure it uses: Immutable value objects (frozen dataclasses) kept in an ordered List

import enum
from dataclasses import dataclass


class EditType(enum.Enum):
    INSERT = 'INSERT'
    DELETE = 'DELETE'
    REPLACE = 'REPLACE'
    EMPTY = 'EMPTY'


@dataclass(frozen=True)
class Edit:
    begin_a: int
    end_a: int
    begin_b: int
    end_b: int

    def __post_init__(self):
        if self.begin_a > self.end_a or self.begin_b > self.end_b:
            raise ValueError(f"Invalid edit ranges: {self!r}")

    @property
    def type(self):
        if self.begin_a < self.end_a:
            if self.begin_b < self.end_b:
                return EditType.REPLACE
            return EditType.DELETE
        if self.begin_b < self.end_b:
            return EditType.INSERT
        return EditType.EMPTY

    @property
    def length_a(self):
        return self.end_a - self.begin_a

    @property
    def length_b(self):
        return self.end_b - self.begin_b

    def is_empty(self):
        return self.type is EditType.EMPTY

    def shift(self, offset_a, offset_b): # Moves the edit by fixed offsets on each side
        return Edit(self.begin_a + offset_a, self.end_a + offset_a,
                    self.begin_b + offset_b, self.end_b + offset_b)

    def __str__(self):
        return f"{self.type.value}({self.begin_a}-{self.end_a},{self.begin_b}-{self.end_b})"


def apply_edits(a, b, edits):
    """
    Rebuilds sequence B by walking A and replacing each edited range of A
    with the matching range of B. Unedited stretches are copied from A.
    """
    result = []
    position = 0
    for edit in edits:
        result.extend(a[position:edit.begin_a])
        result.extend(b[edit.begin_b:edit.end_b])
        position = edit.end_a
    result.extend(a[position:])
    return result


def changed_lines(a, b, edits): # Yields every removed line of A and added line of B, in edit order
    for edit in edits:
        for index in range(edit.begin_a, edit.end_a):
            yield a[index]
        for index in range(edit.begin_b, edit.end_b):
            yield b[index]
