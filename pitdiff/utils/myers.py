# What it does: Computes the minimal list of edits that turns sequence A into sequence B
# How it does: Strips the common prefix and suffix, maps the remaining lines to small integers, then runs Myers' greedy O((N+M)D) search. The furthest-reaching x of every diagonal is snapshotted per edit distance so the path can be traced back from the end. Matched pairs on that path are turned into edits by taking the gaps between them. Finally every pure insertion or deletion is slid down past equal lines, so among equally short scripts the edits sit as late as possible, as git places them
# What data structure it uses: List / Array (the V frontier indexed by diagonal, plus one snapshot per edit distance), Dictionary (line interning table)

from .edit import Edit
from .logger import get_logger

logger = get_logger(__name__)

# Combined length of both trimmed regions above which no search is attempted
DEFAULT_MAX_LINES = 200000


def compute_edits(a, b, max_lines=DEFAULT_MAX_LINES, max_cost=None):
    """
    Returns the edit list transforming a into b.

    a and b are indexable sequences of comparable lines (RawText or lists).
    When the region left after trimming holds more than max_lines lines, or
    the edit distance is larger than max_cost, the whole region is reported
    as a single REPLACE edit instead of searching further.
    """
    len_a, len_b = len(a), len(b)

    prefix = 0
    while prefix < len_a and prefix < len_b and a[prefix] == b[prefix]:
        prefix += 1

    suffix = 0
    while (suffix < len_a - prefix and suffix < len_b - prefix
           and a[len_a - 1 - suffix] == b[len_b - 1 - suffix]):
        suffix += 1

    end_a = len_a - suffix
    end_b = len_b - suffix

    if prefix == end_a and prefix == end_b:
        return []
    if prefix == end_a or prefix == end_b:
        # Pure insertion or deletion, nothing left to search
        return [Edit(prefix, end_a, prefix, end_b)]

    region_size = (end_a - prefix) + (end_b - prefix)
    if max_lines is not None and region_size > max_lines:
        logger.debug("Region of %d lines exceeds limit %d, reporting a full replace", region_size, max_lines)
        return [Edit(prefix, end_a, prefix, end_b)]

    ids_a, ids_b = _intern(a[prefix:end_a], b[prefix:end_b])
    matches = _shortest_edit_matches(ids_a, ids_b, max_cost)
    if matches is None:
        logger.debug("Edit distance exceeds limit %s, reporting a full replace", max_cost)
        return [Edit(prefix, end_a, prefix, end_b)]

    edits = _edits_from_matches(matches, len(ids_a), len(ids_b))
    return _slide_down([edit.shift(prefix, prefix) for edit in edits], a, b)


def _intern(lines_a, lines_b): # Maps equal lines to equal small integers so comparisons stay cheap
    table = {}
    ids_a = [table.setdefault(line, len(table)) for line in lines_a]
    ids_b = [table.setdefault(line, len(table)) for line in lines_b]
    return ids_a, ids_b


def _shortest_edit_matches(a, b, max_cost):
    n, m = len(a), len(b)
    limit = n + m
    if max_cost is not None:
        limit = min(limit, max_cost)

    offset = limit + 1
    v = [0] * (2 * limit + 3)
    trace = []

    for d in range(limit + 1):
        # Snapshot of diagonals -d-1 .. d+1 as they stood before this step
        trace.append(v[offset - d - 1:offset + d + 2])

        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]  # down: insert from b
            else:
                x = v[offset + k - 1] + 1  # right: delete from a
            y = x - k

            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1

            v[offset + k] = x
            if x >= n and y >= m:
                return _backtrack(trace, n, m)

    return None


def _backtrack(trace, n, m): # Walks the snapshots from (n, m) back to (0, 0), collecting matched pairs
    matches = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        base = d + 1
        k = x - y

        if k == -d or (k != d and v[base + k - 1] < v[base + k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1

        prev_x = v[base + prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            matches.append((x, y))

        x, y = prev_x, prev_y

    matches.reverse()
    return matches


def _edits_from_matches(matches, n, m): # Every gap between consecutive matched pairs is one maximal edit
    edits = []
    next_a = next_b = 0
    for x, y in matches:
        if x > next_a or y > next_b:
            edits.append(Edit(next_a, x, next_b, y))
        next_a, next_b = x + 1, y + 1
    if next_a < n or next_b < m:
        edits.append(Edit(next_a, n, next_b, m))
    return edits


def _can_slide(edit, a, b, limit_a):
    # The unchanged line after the edit must equal the edit's first line
    if edit.end_a >= limit_a:
        return False
    if edit.begin_a == edit.end_a:
        return b[edit.begin_b] == b[edit.end_b]
    if edit.begin_b == edit.end_b:
        return a[edit.begin_a] == a[edit.end_a]
    return False


def _slide_down(edits, a, b):
    """
    Moves each pure insertion or deletion as far down as equal lines allow.

    Sliding never changes which lines are added or removed, only which copy
    of a repeated line the edit claims. An edit that slides into the next
    one is merged with it.
    """
    pending = list(edits)
    result = []
    index = 0
    while index < len(pending):
        edit = pending[index]
        following = pending[index + 1] if index + 1 < len(pending) else None
        limit_a = following.begin_a if following is not None else len(a)

        while _can_slide(edit, a, b, limit_a):
            edit = edit.shift(1, 1)

        if following is not None and edit.end_a == following.begin_a:
            pending[index + 1] = Edit(edit.begin_a, following.end_a, edit.begin_b, following.end_b)
        else:
            result.append(edit)
        index += 1
    return result
