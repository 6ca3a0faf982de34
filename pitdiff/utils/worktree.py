# What it does: Lists the files of the working directory as tree entries, honouring `.pitignore`, so the working copy can be diffed like any tree
# How it does: Walks the directory with os.walk, hashes each file as a blob without writing it to the object store, and keeps the bytes it read so the diff engine can ask for them by hash later. Symbolic links are listed with their target as content, executable files with mode 100755
# What data structure it uses: Set (of ignore patterns), Dictionary (hash -> content read from disk), sorted List (of tree entries)

import os
import stat
from fnmatch import fnmatch

from . import objects
from .changes import FileMode, TreeEntry

ALWAYS_IGNORED = {'.pit', '.pit/*', '*.pyc', '__pycache__'}


def get_ignored_patterns(repo_root):
    """
    Reads the .pitignore file and returns a set of glob patterns.
    """
    ignore_file = os.path.join(repo_root, '.pitignore')
    patterns = set(ALWAYS_IGNORED)

    if os.path.exists(ignore_file):
        with open(ignore_file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    patterns.add(line)
    return patterns


def is_ignored(path, ignore_patterns): # Returns True if the path, or any of its components, matches an ignore pattern
    for pattern in ignore_patterns:
        if fnmatch(path, pattern) or any(fnmatch(part, pattern) for part in path.split('/')):
            return True
    return False


def _file_mode(st):
    if stat.S_ISLNK(st.st_mode):
        return FileMode.SYMLINK
    if st.st_mode & stat.S_IXUSR:
        return FileMode.EXECUTABLE_FILE
    return FileMode.REGULAR_FILE


class WorkingTree:
    """
    A snapshot of the working directory.

    entries() gives the path-sorted listing; read() is the content source
    for the ids it produced, falling back to the object store for any other
    id.
    """

    def __init__(self, repo_root):
        self.repo_root = repo_root
        self._contents = {}
        self._entries = None

    def entries(self):
        if self._entries is None:
            self._entries = self._scan()
        return self._entries

    def _scan(self):
        entries = []
        ignore_patterns = get_ignored_patterns(self.repo_root)
        for root, dirs, files in os.walk(self.repo_root):
            # Filter out the .pit directory
            if '.pit' in dirs:
                dirs.remove('.pit')
            dirs.sort()

            for name in files:
                file_path = os.path.join(root, name)
                rel_path = os.path.relpath(file_path, self.repo_root).replace(os.sep, '/')
                if is_ignored(rel_path, ignore_patterns):
                    continue

                st = os.lstat(file_path)
                mode = _file_mode(st)
                if mode == FileMode.SYMLINK:
                    content = os.fsencode(os.readlink(file_path))
                else:
                    with open(file_path, 'rb') as f:
                        content = f.read()

                object_id = objects.hash_object(self.repo_root, content, 'blob', write=False)
                self._contents[object_id] = content
                entries.append(TreeEntry(rel_path, mode, object_id))

        entries.sort(key=lambda entry: entry.path)
        return entries

    def read(self, object_id): # Content source: working tree bytes first, then the object store
        content = self._contents.get(object_id)
        if content is not None:
            return content
        return objects.read_blob(self.repo_root, object_id)
