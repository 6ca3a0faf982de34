# What it does: Shortens full content ids to the shortest unambiguous hex prefix, and expands prefixes back to full ids
# How it does: Starts from the requested length and asks the object store for every id sharing that prefix. While some other id still shares the prefix, the prefix grows by one character. Without an object store to ask, the id is simply cut to the requested length
# What data structure it uses: Set (of candidate ids sharing a prefix)

from .changes import ZERO_ID
from .errors import AmbiguousObjectId, ContentUnavailable

DEFAULT_ABBREV = 7
MIN_ABBREV = 4
ID_LENGTH = 40


def abbreviate(object_id, length=DEFAULT_ABBREV, resolve=None):
    """
    Returns the shortest prefix of object_id, at least length characters
    long, that no other known object shares.

    resolve maps a prefix to an iterable of the full ids that start with it.
    The zero id never lives in the object store, so it is only cut.
    """
    if length < MIN_ABBREV:
        raise ValueError(f"Abbreviation length must be at least {MIN_ABBREV}: {length}")
    if length >= len(object_id) or resolve is None or object_id == ZERO_ID:
        return object_id[:length]

    candidates = set(resolve(object_id[:length]))
    candidates.discard(object_id)
    while length < len(object_id):
        prefix = object_id[:length]
        candidates = {c for c in candidates if c.startswith(prefix)}
        if not candidates:
            return prefix
        length += 1
    return object_id


def expand(prefix, resolve): # Turns an abbreviated id back into the single full id it names
    prefix = prefix.lower()
    if len(prefix) == ID_LENGTH:
        return prefix
    if len(prefix) < MIN_ABBREV:
        raise ContentUnavailable(prefix, "abbreviation too short")
    candidates = set(resolve(prefix))
    if not candidates:
        raise ContentUnavailable(prefix)
    if len(candidates) > 1:
        raise AmbiguousObjectId(prefix, candidates)
    return candidates.pop()


class Abbreviator:
    """
    Abbreviates ids against one object store, remembering what it already
    resolved for the lifetime of a single formatting run.
    """

    def __init__(self, length=DEFAULT_ABBREV, resolve=None):
        if length < MIN_ABBREV:
            raise ValueError(f"Abbreviation length must be at least {MIN_ABBREV}: {length}")
        self.length = length
        self.resolve = resolve
        self._names = {}

    def __call__(self, object_id):
        name = self._names.get(object_id)
        if name is None:
            name = abbreviate(object_id, self.length, self.resolve)
            self._names[object_id] = name
        return name
