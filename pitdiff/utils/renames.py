# What it does: Re-pairs unmatched deletions and additions into RENAME or COPY records
# How it does: First pairs deletes and adds that carry the same content id (score 100). The remaining pairs are scored by counting the bytes their line blocks have in common. Pairs at or above the threshold are taken best score first, ties broken by old path then new path, each add used once. The first use of a deleted source is a rename, any later use of it is a copy
# What data structure it uses: Dictionary (block -> byte count per blob, id -> entries), List (candidate pairs sorted by score), Set (paths already consumed)

from collections import defaultdict

from .changes import ChangeRecord, ChangeType, FileMode
from .logger import get_logger

logger = get_logger(__name__)

MAX_SCORE = 100
DEFAULT_RENAME_SCORE = 60
DEFAULT_RENAME_LIMIT = 400

# Long lines are cut into blocks of at most this many bytes
BLOCK_SIZE = 64


def count_blocks(content): # Maps every block (a line, or a 64-byte piece of one) to the bytes it covers
    counts = defaultdict(int)
    start = 0
    length = len(content)
    while start < length:
        newline = content.find(b'\n', start, start + BLOCK_SIZE)
        end = newline + 1 if newline != -1 else min(start + BLOCK_SIZE, length)
        block = content[start:end]
        counts[block] += len(block)
        start = end
    return counts


def common_bytes(blocks1, blocks2):
    if len(blocks1) > len(blocks2):
        blocks1, blocks2 = blocks2, blocks1
    score = 0
    for block, count1 in blocks1.items():
        count2 = blocks2.get(block)
        if count2:
            score += min(count1, count2)
    return score


def similarity_score(content1, content2, blocks1=None, blocks2=None):
    """
    Scores how much two blobs share, from 0 to 100: the bytes their blocks
    have in common divided by the size of the larger blob.
    """
    max_size = max(len(content1), len(content2))
    if not max_size:
        return MAX_SCORE
    if blocks1 is None:
        blocks1 = count_blocks(content1)
    if blocks2 is None:
        blocks2 = count_blocks(content2)
    return int(common_bytes(blocks1, blocks2) * MAX_SCORE / max_size)


def _same_kind(old_mode, new_mode):
    return FileMode(old_mode).object_type == FileMode(new_mode).object_type


class RenameDetector:
    """
    Turns DELETE/ADD pairs of a change list into RENAME and COPY records.

    load is a callable mapping a content id to its bytes. It is only called
    for content comparisons, never for exact id matches.
    """

    def __init__(self, load, rename_score=DEFAULT_RENAME_SCORE, rename_limit=DEFAULT_RENAME_LIMIT,
                 find_copies=False):
        if not 0 <= rename_score <= MAX_SCORE:
            raise ValueError(f"Rename score must be between 0 and 100: {rename_score}")
        self.load = load
        self.rename_score = rename_score
        self.rename_limit = rename_limit
        self.find_copies = find_copies

    def detect(self, changes): # Returns a new, sorted change list with renames and copies paired up
        adds = [c for c in changes if c.change_type is ChangeType.ADD]
        deletes = [c for c in changes if c.change_type is ChangeType.DELETE]
        others = [c for c in changes if c.change_type not in (ChangeType.ADD, ChangeType.DELETE)]
        if not adds:
            return sorted(changes, key=ChangeRecord.sort_key)

        # Modified files can seed copies but are never consumed
        sources = list(deletes)
        if self.find_copies:
            sources.extend(c for c in others if c.change_type is ChangeType.MODIFY)

        used_adds = set()
        used_deletes = set()
        paired = self._exact_renames(sources, adds, used_adds, used_deletes)
        remaining_adds = [a for a in adds if a.new_path not in used_adds]
        paired.extend(self._content_renames(sources, remaining_adds, used_adds, used_deletes))

        result = list(others)
        result.extend(paired)
        result.extend(a for a in adds if a.new_path not in used_adds)
        result.extend(d for d in deletes if d.old_path not in used_deletes)
        result.sort(key=ChangeRecord.sort_key)
        return result

    def _pair(self, source, add, score, used_adds, used_deletes):
        if source.change_type is ChangeType.DELETE and source.old_path not in used_deletes:
            change_type = ChangeType.RENAME
            used_deletes.add(source.old_path)
        else:
            change_type = ChangeType.COPY
        used_adds.add(add.new_path)
        logger.debug("Pairing %s with %s as %s (score %d)", source.old_path, add.new_path,
                     change_type.value, score)
        return ChangeRecord.pair(change_type, source, add, score)

    def _exact_renames(self, sources, adds, used_adds, used_deletes):
        by_id = defaultdict(list)
        for source in sources:
            by_id[source.old_id].append(source)

        paired = []
        for add in sorted(adds, key=lambda a: a.new_path):
            candidates = [s for s in by_id.get(add.new_id, ())
                          if s.old_mode != FileMode.GITLINK and _same_kind(s.old_mode, add.new_mode)]
            if not candidates:
                continue
            # A source that can still become a rename goes first
            candidates.sort(key=lambda s: (s.change_type is not ChangeType.DELETE or s.old_path in used_deletes,
                                           s.old_path))
            paired.append(self._pair(candidates[0], add, MAX_SCORE, used_adds, used_deletes))
        return paired

    def _content_renames(self, sources, adds, used_adds, used_deletes):
        if not sources or not adds:
            return []
        if self.rename_limit is not None and len(sources) * len(adds) > self.rename_limit ** 2:
            logger.debug("Skipping content rename detection: %d x %d pairs exceeds the limit",
                         len(sources), len(adds))
            return []

        loaded = {}

        def blocks_for(object_id):
            if object_id not in loaded:
                content = self.load(object_id)
                loaded[object_id] = (content, count_blocks(content))
            return loaded[object_id]

        candidates = []
        for source in sources:
            if source.old_mode == FileMode.GITLINK:
                continue
            old_content, old_blocks = blocks_for(source.old_id)
            for add in adds:
                if not _same_kind(source.old_mode, add.new_mode):
                    continue
                new_content, new_blocks = blocks_for(add.new_id)
                score = similarity_score(old_content, new_content, old_blocks, new_blocks)
                if score >= self.rename_score:
                    candidates.append((-score, source.old_path, add.new_path, source, add))

        # Highest score first, then old path, then new path
        candidates.sort(key=lambda c: c[:3])
        paired = []
        for negative_score, _, new_path, source, add in candidates:
            if new_path in used_adds:
                continue
            paired.append(self._pair(source, add, -negative_score, used_adds, used_deletes))
        return paired
