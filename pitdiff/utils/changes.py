# What it does: Describes file-level changes between two trees and finds them
# How it does: scan() merge-joins two path-sorted entry listings with two pointers. A path only on the old side is a DELETE, only on the new side an ADD, and on both sides with a different id or mode a MODIFY. Identical entries produce nothing
# What data structure it uses: Sorted List / Array (the two listings, walked once each), immutable records (frozen dataclass and namedtuple)

import enum
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional

from .errors import MalformedEntry

DEV_NULL = '/dev/null'

ZERO_ID = '0' * 40


class FileMode(enum.IntEnum):
    MISSING = 0
    TREE = 0o040000
    REGULAR_FILE = 0o100644
    EXECUTABLE_FILE = 0o100755
    SYMLINK = 0o120000
    GITLINK = 0o160000

    @property
    def object_type(self): # The coarse kind of entry; entries of different kinds never pair as renames
        return self.value & 0o170000

    def __str__(self):
        return '%06o' % self.value


def parse_mode(text): # Turns the octal text stored in tree objects into a FileMode
    return FileMode(int(text, 8))


TreeEntry = namedtuple('TreeEntry', ['path', 'mode', 'id'])


class ChangeType(enum.Enum):
    ADD = 'ADD'
    DELETE = 'DELETE'
    MODIFY = 'MODIFY'
    COPY = 'COPY'
    RENAME = 'RENAME'


@dataclass(frozen=True)
class ChangeRecord:
    """
    One file-level change between two tree states.

    Records never change after construction. Metadata that cannot be derived
    from comparing trees (explicit modes, unknown ids) is passed to the
    factory methods instead of being patched in afterwards.
    """

    change_type: ChangeType
    old_path: str
    new_path: str
    old_mode: FileMode
    new_mode: FileMode
    old_id: Optional[str]
    new_id: Optional[str]
    score: int = 0

    def __post_init__(self):
        if self.change_type is ChangeType.MODIFY and self.old_path != self.new_path:
            raise ValueError(f"MODIFY must keep its path: {self.old_path} != {self.new_path}")
        if self.change_type in (ChangeType.RENAME, ChangeType.COPY) and self.old_path == self.new_path:
            raise ValueError(f"{self.change_type.value} must change the path: {self.old_path}")
        if not 0 <= self.score <= 100:
            raise ValueError(f"Score out of range: {self.score}")

    @classmethod
    def add(cls, path, object_id, mode=FileMode.REGULAR_FILE):
        return cls(ChangeType.ADD, DEV_NULL, path, FileMode.MISSING, FileMode(mode), ZERO_ID, object_id)

    @classmethod
    def delete(cls, path, object_id, mode=FileMode.REGULAR_FILE):
        return cls(ChangeType.DELETE, path, DEV_NULL, FileMode(mode), FileMode.MISSING, object_id, ZERO_ID)

    @classmethod
    def modify(cls, path, old_mode=FileMode.REGULAR_FILE, new_mode=FileMode.REGULAR_FILE,
               old_id=None, new_id=None):
        return cls(ChangeType.MODIFY, path, path, FileMode(old_mode), FileMode(new_mode), old_id, new_id)

    @classmethod
    def pair(cls, change_type, src, dst, score, old_id=..., new_id=...):
        """
        Joins the old side of src with the new side of dst.

        Passing old_id/new_id overrides the ids taken from the two records,
        None meaning "content unknown".
        """
        return cls(
            change_type,
            src.old_path,
            dst.new_path,
            src.old_mode,
            dst.new_mode,
            src.old_id if old_id is ... else old_id,
            dst.new_id if new_id is ... else new_id,
            score,
        )

    @property
    def path(self): # The path a reader would name this change by
        if self.change_type is ChangeType.DELETE:
            return self.old_path
        return self.new_path

    def touches(self, root): # True if either side lies at or under the given directory or file
        return _is_under(self.old_path, root) or _is_under(self.new_path, root)

    def sort_key(self):
        old_path = self.new_path if self.old_path == DEV_NULL else self.old_path
        new_path = self.old_path if self.new_path == DEV_NULL else self.new_path
        return old_path, new_path

    def __str__(self):
        if self.change_type in (ChangeType.RENAME, ChangeType.COPY):
            return f"{self.change_type.value} {self.old_path} -> {self.new_path}"
        return f"{self.change_type.value} {self.path}"


def _is_under(path, root):
    if path == DEV_NULL:
        return False
    root = root.strip('/')
    if not root:
        return True
    return path == root or path.startswith(root + '/')


def _checked(entries): # Yields the file entries of a listing, enforcing strictly increasing paths
    previous = None
    for entry in entries or ():
        if previous is not None and entry.path <= previous:
            raise MalformedEntry(entry.path, previous)
        previous = entry.path
        try:
            mode = FileMode(entry.mode)
        except ValueError:
            raise MalformedEntry(entry.path) from None
        if mode is FileMode.TREE:
            continue
        yield entry


def scan(old_entries, new_entries):
    """
    Compares two tree listings and returns the ChangeRecords between them.

    Either listing may be None, standing for the empty tree. Listings must be
    sorted by path with no repeats, otherwise MalformedEntry is raised.
    """
    changes = []
    old_iter = _checked(old_entries)
    new_iter = _checked(new_entries)
    old = next(old_iter, None)
    new = next(new_iter, None)

    while old is not None and new is not None:
        if old.path < new.path:
            changes.append(ChangeRecord.delete(old.path, old.id, old.mode))
            old = next(old_iter, None)
        elif old.path > new.path:
            changes.append(ChangeRecord.add(new.path, new.id, new.mode))
            new = next(new_iter, None)
        else:
            if old.id != new.id or old.mode != new.mode:
                changes.append(ChangeRecord.modify(old.path, old.mode, new.mode, old.id, new.id))
            old = next(old_iter, None)
            new = next(new_iter, None)

    while old is not None:
        changes.append(ChangeRecord.delete(old.path, old.id, old.mode))
        old = next(old_iter, None)
    while new is not None:
        changes.append(ChangeRecord.add(new.path, new.id, new.mode))
        new = next(new_iter, None)

    return changes
