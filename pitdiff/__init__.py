# pit-diff: git-compatible diff computation and patch rendering for pit repositories

from .utils.changes import ChangeRecord, ChangeType, FileMode, TreeEntry, scan
from .utils.edit import Edit, EditType
from .utils.errors import (
    AmbiguousObjectId,
    ContentUnavailable,
    DiffCancelled,
    MalformedEntry,
    PitError,
    UnsupportedPatchType,
)
from .utils.formatter import DiffFormatter, FileHeader, PatchType
from .utils.myers import compute_edits

__version__ = "0.1.0"

__all__ = [
    "AmbiguousObjectId",
    "ChangeRecord",
    "ChangeType",
    "ContentUnavailable",
    "DiffCancelled",
    "DiffFormatter",
    "Edit",
    "EditType",
    "FileHeader",
    "FileMode",
    "MalformedEntry",
    "PatchType",
    "PitError",
    "TreeEntry",
    "UnsupportedPatchType",
    "compute_edits",
    "scan",
]
