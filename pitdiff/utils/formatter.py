# What it does: Formats a list of change records as a git patch and streams it to a binary output
# How it does: For each record inside the path filter it loads both sides through the content source, computes the edit list and hunks, renders the header, and keeps the whole record in memory. The optional delta filter then inspects the removed and added lines; only records that pass are written, in one piece, so a record is either complete in the output or absent
# What data structure it uses: List (of records, hunks and edits), in-memory byte buffers per record

import enum
import re
from dataclasses import dataclass, field

from . import changes as changes_utils
from .abbrev import DEFAULT_ABBREV, Abbreviator
from .changes import FileMode
from .errors import ContentUnavailable, DiffCancelled, UnsupportedPatchType
from .header import DEFAULT_NEW_PREFIX, DEFAULT_OLD_PREFIX, format_header
from .hunks import DEFAULT_CONTEXT, Hunk, build_hunks
from .logger import get_logger
from .myers import DEFAULT_MAX_LINES, compute_edits
from .renames import DEFAULT_RENAME_LIMIT, DEFAULT_RENAME_SCORE, RenameDetector
from .sequence import FIRST_FEW_BYTES, RawText, gitlink_content, is_binary

logger = get_logger(__name__)


class PatchType(enum.Enum):
    UNIFIED = 'unified'
    BINARY = 'binary'
    GIT_BINARY = 'git-binary'


@dataclass
class FileHeader:
    """
    One formatted record: the header bytes (including the ---/+++ lines and
    the binary notice when present), its hunks, and how it was rendered.
    """

    change: changes_utils.ChangeRecord
    buffer: bytes
    hunks: list = field(default_factory=list)
    patch_type: PatchType = PatchType.UNIFIED

    @property
    def script_text(self):
        return self.buffer.decode('utf-8', errors='replace')

    @property
    def edits(self):
        return [edit for hunk in self.hunks for edit in hunk.edits]

    def changed_text(self):
        return b''.join(hunk.changed_text() for hunk in self.hunks)

    def to_bytes(self):
        return self.buffer + b''.join(hunk.to_bytes() for hunk in self.hunks)


def _delta_matcher(delta_filter): # Builds a predicate over the changed bytes of a record
    if delta_filter is None:
        return None
    if isinstance(delta_filter, (str, bytes)):
        delta_filter = re.compile(delta_filter)
    if isinstance(delta_filter.pattern, str):
        return lambda text: delta_filter.search(text.decode('utf-8', errors='replace')) is not None
    return lambda text: delta_filter.search(text) is not None


def _filter_roots(path_filter):
    if path_filter is None:
        return None
    if isinstance(path_filter, str):
        return [path_filter]
    return list(path_filter)


class DiffFormatter:
    """
    Turns change records into patch bytes.

    out is a binary file-like object. load maps a content id to its bytes
    and raises ContentUnavailable when it cannot. resolve, when given, maps
    an id prefix to the ids sharing it so abbreviations stay unambiguous.
    """

    def __init__(self, out=None, load=None, context=DEFAULT_CONTEXT, abbrev=DEFAULT_ABBREV, resolve=None,
                 old_prefix=DEFAULT_OLD_PREFIX, new_prefix=DEFAULT_NEW_PREFIX, path_filter=None,
                 detect_renames=False, rename_score=DEFAULT_RENAME_SCORE, rename_limit=DEFAULT_RENAME_LIMIT,
                 find_copies=False, binary_scan=FIRST_FEW_BYTES, max_lines=DEFAULT_MAX_LINES, max_cost=None,
                 patch_type=PatchType.UNIFIED):
        try:
            patch_type = PatchType(patch_type)
        except ValueError:
            raise UnsupportedPatchType(patch_type) from None
        if patch_type is not PatchType.UNIFIED:
            raise UnsupportedPatchType(patch_type.value)
        if context < 0:
            raise ValueError(f"Context must not be negative: {context}")

        self.out = out
        self.load = load
        self.context = context
        self.abbreviate = Abbreviator(abbrev, resolve)
        self.old_prefix = old_prefix
        self.new_prefix = new_prefix
        self.path_filter = _filter_roots(path_filter)
        self.detect_renames = detect_renames
        self.rename_score = rename_score
        self.rename_limit = rename_limit
        self.find_copies = find_copies
        self.binary_scan = binary_scan
        self.max_lines = max_lines
        self.max_cost = max_cost

    def scan(self, old_entries, new_entries): # Matches two tree listings into change records, pairing renames if enabled
        found = changes_utils.scan(old_entries, new_entries)
        if self.detect_renames:
            detector = RenameDetector(self._load, self.rename_score, self.rename_limit, self.find_copies)
            found = detector.detect(found)
        return found

    def is_selected(self, change): # True if the change lies under the path filter
        if not self.path_filter:
            return True
        return any(change.touches(root) for root in self.path_filter)

    def _load(self, object_id):
        if self.load is None:
            raise ContentUnavailable(object_id, "no content source configured")
        return self.load(object_id)

    def _open(self, mode, object_id):
        if mode == FileMode.MISSING:
            return b''
        if mode == FileMode.GITLINK:
            return gitlink_content(object_id)
        return self._load(object_id)

    def to_file_header(self, change):
        """
        Formats one record in memory and returns it as a FileHeader.

        Nothing is written. Content is loaded only when both ids are known
        and differ; otherwise the record is metadata only (mode change, pure
        rename) and has no hunks.
        """
        if change.old_id is None or change.new_id is None or change.old_id == change.new_id:
            buffer = format_header(change, self.abbreviate, self.old_prefix, self.new_prefix)
            return FileHeader(change, buffer)

        old_content = self._open(change.old_mode, change.old_id)
        new_content = self._open(change.new_mode, change.new_id)

        if is_binary(old_content, self.binary_scan) or is_binary(new_content, self.binary_scan):
            logger.debug("Binary content in %s, skipping line diff", change.path)
            buffer = format_header(change, self.abbreviate, self.old_prefix, self.new_prefix, binary=True)
            return FileHeader(change, buffer, [Hunk.binary()], PatchType.BINARY)

        a = RawText(old_content)
        b = RawText(new_content)
        edits = compute_edits(a, b, self.max_lines, self.max_cost)
        hunks = build_hunks(edits, a, b, self.context)
        buffer = format_header(change, self.abbreviate, self.old_prefix, self.new_prefix,
                               show_paths=bool(hunks))
        return FileHeader(change, buffer, hunks)

    def format(self, changes, delta_filter=None, cancelled=None):
        """
        Writes every selected record to the output, in order.

        delta_filter is a regular expression (text, bytes or compiled). A
        record whose removed and added lines contain no match is left out
        entirely. cancelled is polled before each record; when it returns
        True, DiffCancelled is raised and nothing more is written.

        Returns the number of records written.
        """
        if self.out is None:
            raise ValueError("DiffFormatter has no output stream")
        matches = _delta_matcher(delta_filter)

        written = 0
        for change in changes:
            if cancelled is not None and cancelled():
                raise DiffCancelled(f"Cancelled after {written} records")
            if not self.is_selected(change):
                logger.debug("Skipping %s: outside path filter", change)
                continue

            file_header = self.to_file_header(change)
            if matches is not None and not matches(file_header.changed_text()):
                logger.debug("Suppressing %s: no changed line matches the delta filter", change)
                continue

            self.out.write(file_header.to_bytes())
            written += 1
        return written

    def format_trees(self, old_entries, new_entries, delta_filter=None, cancelled=None):
        """
        Scans two tree listings and formats the changes between them.
        Either side may be None for the empty tree.
        """
        if old_entries is None and new_entries is None:
            return 0
        return self.format(self.scan(old_entries, new_entries), delta_filter, cancelled)

    def flush(self):
        if self.out is not None:
            self.out.flush()
