# Shared pytest fixtures for pit-diff tests

import pytest
import os
import shutil
import tempfile

from pitdiff.utils import objects
from pitdiff.utils.changes import FileMode, TreeEntry
from pitdiff.utils.errors import ContentUnavailable


@pytest.fixture
def temp_dir():
    # Creates a temporary directory that is cleaned up after the test
    # Also saves/restores cwd to prevent issues when tests change directories
    original_dir = os.getcwd()
    tmp = tempfile.mkdtemp()
    yield tmp
    os.chdir(original_dir)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_repo(temp_dir):
    # Creates an initialized Pit repository in a temporary directory
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    # Initialize repository
    pit_dir = os.path.join(temp_dir, '.pit')
    os.makedirs(os.path.join(pit_dir, 'objects'))
    os.makedirs(os.path.join(pit_dir, 'refs', 'heads'))
    with open(os.path.join(pit_dir, 'HEAD'), 'w') as f:
        f.write('ref: refs/heads/master\n')

    # Set up config
    config_path = os.path.join(pit_dir, 'config')
    with open(config_path, 'w') as f:
        f.write('[user]\n')
        f.write('name = Test User\n')
        f.write('email = test@example.com\n')

    yield temp_dir

    os.chdir(original_dir)


def write_files(repo_root, files):
    # Writes {relative path: text or bytes} into the working directory
    for path, content in files.items():
        full_path = os.path.join(repo_root, *path.split('/'))
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        with open(full_path, 'wb') as f:
            f.write(content)


def make_commit(repo_root, files, message='commit', branch='master'):
    # Stores {path: text, bytes or (mode, text)} as blobs, commits them and moves the branch
    tree_files = {}
    for path, content in files.items():
        mode = FileMode.REGULAR_FILE
        if isinstance(content, tuple):
            mode, content = content
        if isinstance(content, str):
            content = content.encode()
        tree_files[path] = (mode, objects.hash_object(repo_root, content, 'blob'))

    tree_hash = objects.write_tree(repo_root, objects.build_tree_from_dict(tree_files))
    branch_path = os.path.join(repo_root, '.pit', 'refs', 'heads', branch)
    parents = []
    if os.path.exists(branch_path):
        with open(branch_path, 'r') as f:
            parents = [f.read().strip()]
    commit_hash = objects.commit_tree(repo_root, tree_hash, message, parents)

    with open(branch_path, 'w') as f:
        f.write(commit_hash)
    return commit_hash


@pytest.fixture
def repo_with_commit(temp_repo):
    # Creates a repo with one committed file that is also present in the working directory
    write_files(temp_repo, {'README.md': '# Test Project\n'})
    commit_hash = make_commit(temp_repo, {'README.md': '# Test Project\n'}, 'Initial commit')
    return temp_repo, commit_hash


class MemoryStore:
    # An in-memory content source: blob id -> bytes, ids computed exactly like the object store

    def __init__(self):
        self.blobs = {}
        self.loads = []

    def put(self, content):
        if isinstance(content, str):
            content = content.encode()
        object_id = objects.hash_object(None, content, 'blob', write=False)
        self.blobs[object_id] = content
        return object_id

    def entry(self, path, content, mode=FileMode.REGULAR_FILE):
        return TreeEntry(path, mode, self.put(content))

    def load(self, object_id):
        self.loads.append(object_id)
        try:
            return self.blobs[object_id]
        except KeyError:
            raise ContentUnavailable(object_id) from None

    def resolve(self, prefix):
        return [object_id for object_id in self.blobs if object_id.startswith(prefix)]


@pytest.fixture
def store():
    return MemoryStore()


# Mock args object for command functions
class MockArgs:
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)


def diff_args(**overrides):
    # Builds the namespace `pit-diff diff` would parse with no flags given
    values = dict(
        revisions=[], paths=[], unified=None, abbrev=None, find_renames=None, find_copies=False,
        delta_filter=None, src_prefix='a/', dst_prefix='b/', no_prefix=False,
    )
    values.update(overrides)
    return MockArgs(**values)
