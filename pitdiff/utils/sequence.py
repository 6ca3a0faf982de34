# What it does: Turns raw blob bytes into a sequence of lines the edit script computer can compare
# How it does: Splits on b'\n' and keeps the terminator with each line, so a last line without a newline never compares equal to the same text with one. Binary detection is a heuristic: a NUL byte within the first few thousand bytes marks the buffer as binary
# What data structure it uses: List / Array (of line byte strings, indexed by 0-based line number)

# Same prefix size git inspects before calling a buffer binary
FIRST_FEW_BYTES = 8000


def is_binary(content, scan_limit=FIRST_FEW_BYTES): # Returns True if a NUL byte occurs in the scanned prefix
    if scan_limit is None:
        return b'\0' in content
    return b'\0' in content[:scan_limit]


def split_lines(content): # Splits bytes into lines, each keeping its trailing b'\n' if it has one
    if not content:
        return []
    lines = content.split(b'\n')
    last = lines.pop()
    result = [line + b'\n' for line in lines]
    if last:
        result.append(last)
    return result


class RawText:
    """
    A blob viewed as a sequence of lines.

    Indexing returns the line including its terminator. Use get_string() for
    the text without it.
    """

    def __init__(self, content):
        self.content = content
        self.lines = split_lines(content)

    def __len__(self):
        return len(self.lines)

    def __getitem__(self, index):
        return self.lines[index]

    def __iter__(self):
        return iter(self.lines)

    def size(self):
        return len(self.lines)

    def is_missing_newline_at_end(self):
        return bool(self.content) and not self.content.endswith(b'\n')

    def get_string(self, index): # Line text without its terminator, decoded for display
        line = self.lines[index]
        if line.endswith(b'\n'):
            line = line[:-1]
        return line.decode('utf-8', errors='replace')


def gitlink_content(object_id): # Submodule links have no blob; git shows the commit they point to
    return f"Subproject commit {object_id}\n".encode()
