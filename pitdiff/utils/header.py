# What it does: Renders the per-file header of a git patch: the "diff --git" line, the extended header lines, and the ---/+++ lines
# How it does: Builds the header as a list of text lines in the fixed order git uses, each line included only when the change record calls for it, then encodes the result as UTF-8
# What data structure it uses: List (of header lines), Dictionary (escape table for quoting paths)

from .changes import DEV_NULL, ChangeType, FileMode

DIFF_GIT = 'diff --git '

BINARY_NOTICE = 'Binary files differ'

DEFAULT_OLD_PREFIX = 'a/'
DEFAULT_NEW_PREFIX = 'b/'

_ESCAPES = {
    0x07: '\\a',
    0x08: '\\b',
    0x09: '\\t',
    0x0a: '\\n',
    0x0b: '\\v',
    0x0c: '\\f',
    0x0d: '\\r',
    0x22: '\\"',
    0x5c: '\\\\',
}


def _needs_quoting(byte):
    return byte < 0x20 or byte >= 0x7f or byte in (0x22, 0x5c)


def quote_path(path):
    """
    Quotes a path the way git does in patch headers.

    Paths made only of printable ASCII (other than '"' and '\\') are
    returned unchanged. Anything else is wrapped in double quotes with C
    escapes, non-ASCII bytes written as three-digit octal.
    """
    raw = path.encode('utf-8', errors='surrogateescape')
    if not any(_needs_quoting(byte) for byte in raw):
        return path
    quoted = ['"']
    for byte in raw:
        if byte in _ESCAPES:
            quoted.append(_ESCAPES[byte])
        elif _needs_quoting(byte):
            quoted.append('\\%03o' % byte)
        else:
            quoted.append(chr(byte))
    quoted.append('"')
    return ''.join(quoted)


def mode_text(mode): # Modes always print as six octal digits, e.g. 040000 for a tree
    return '%06o' % int(mode)


def git_diff_line(change, old_prefix=DEFAULT_OLD_PREFIX, new_prefix=DEFAULT_NEW_PREFIX):
    old_path = change.new_path if change.change_type is ChangeType.ADD else change.old_path
    new_path = change.old_path if change.change_type is ChangeType.DELETE else change.new_path
    return DIFF_GIT + quote_path(old_prefix + old_path) + ' ' + quote_path(new_prefix + new_path)


def has_index_line(change):
    # An index line needs both ids. A record missing either one was built
    # without content (mode change, pure rename) and gets none; the matcher
    # always fills both sides, so only synthesized records hit this
    return (change.old_id is not None and change.new_id is not None
            and change.old_id != change.new_id)


def index_line(change, abbreviate):
    line = f"index {abbreviate(change.old_id)}..{abbreviate(change.new_id)}"
    if change.old_mode == change.new_mode:
        line += ' ' + mode_text(change.new_mode)
    return line


def extended_header_lines(change, abbreviate):
    lines = []
    change_type = change.change_type

    if change_type in (ChangeType.MODIFY, ChangeType.RENAME, ChangeType.COPY) \
            and change.old_mode != change.new_mode:
        lines.append(f"old mode {mode_text(change.old_mode)}")
        lines.append(f"new mode {mode_text(change.new_mode)}")

    if change_type is ChangeType.ADD:
        lines.append(f"new file mode {mode_text(change.new_mode)}")
    elif change_type is ChangeType.DELETE:
        lines.append(f"deleted file mode {mode_text(change.old_mode)}")
    elif change_type is ChangeType.RENAME:
        lines.append(f"similarity index {change.score}%")
        lines.append(f"rename from {quote_path(change.old_path)}")
        lines.append(f"rename to {quote_path(change.new_path)}")
    elif change_type is ChangeType.COPY:
        lines.append(f"similarity index {change.score}%")
        lines.append(f"copy from {quote_path(change.old_path)}")
        lines.append(f"copy to {quote_path(change.new_path)}")
    elif change.score > 0:
        lines.append(f"dissimilarity index {change.score}%")

    if has_index_line(change):
        lines.append(index_line(change, abbreviate))
    return lines


def old_new_path_lines(change, old_prefix=DEFAULT_OLD_PREFIX, new_prefix=DEFAULT_NEW_PREFIX):
    if change.old_mode == FileMode.MISSING:
        old_path = DEV_NULL
    else:
        old_path = quote_path(old_prefix + change.old_path)
    if change.new_mode == FileMode.MISSING:
        new_path = DEV_NULL
    else:
        new_path = quote_path(new_prefix + change.new_path)
    return [f"--- {old_path}", f"+++ {new_path}"]


def format_header(change, abbreviate, old_prefix=DEFAULT_OLD_PREFIX, new_prefix=DEFAULT_NEW_PREFIX,
                  show_paths=False, binary=False):
    """
    Returns the header bytes for one change record.

    show_paths adds the ---/+++ lines, which only belong in front of
    compared content that differs. binary appends the notice that replaces
    the hunks of binary content.
    """
    lines = [git_diff_line(change, old_prefix, new_prefix)]
    lines.extend(extended_header_lines(change, abbreviate))
    if show_paths or binary:
        lines.extend(old_new_path_lines(change, old_prefix, new_prefix))
    if binary:
        lines.append(BINARY_NOTICE)
    return ''.join(line + '\n' for line in lines).encode('utf-8', errors='surrogateescape')
