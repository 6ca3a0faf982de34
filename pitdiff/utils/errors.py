# What it does: Defines the exceptions raised by the diff engine and its collaborators
# What data structure it uses: A small class hierarchy rooted at PitError so commands can catch everything pit-specific in one place


class PitError(Exception):
    """Base exception for all pit-diff errors."""


class ContentUnavailable(PitError):
    """Raised when a content id cannot be resolved to bytes."""

    def __init__(self, object_id, reason=None):
        self.object_id = object_id
        message = f"Object not found: {object_id}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedPatchType(PitError):
    """Raised when a rendering mode other than unified diff is requested."""

    def __init__(self, patch_type):
        self.patch_type = patch_type
        super().__init__(f"Unsupported patch type: {patch_type}")


class MalformedEntry(PitError):
    """Raised when a tree listing is not sorted by path or repeats a path."""

    def __init__(self, path, previous=None):
        self.path = path
        self.previous = previous
        if previous is None:
            super().__init__(f"Malformed tree entry: {path!r}")
        else:
            super().__init__(f"Malformed tree entry: {path!r} does not sort after {previous!r}")


class AmbiguousObjectId(PitError):
    """Raised when an abbreviated id matches more than one object."""

    def __init__(self, prefix, candidates):
        self.prefix = prefix
        self.candidates = sorted(candidates)
        super().__init__(f"Short object id {prefix} is ambiguous ({len(self.candidates)} candidates)")


class DiffCancelled(PitError):
    """Raised when formatting is cancelled between two records."""
