# What it does: Manages the low-level object database: storing and retrieving blobs, trees and commits, and listing the tree entries the diff engine compares
# How it does: It implements a content-addressed storage system. `hash_object` saves content and returns its hash. `read_object` retrieves content using its hash. Trees are written from a flat {path: (mode, hash)} mapping and read back as a flat, path-sorted list of entries
# What data structure it uses: Hash Table / Dictionary (the entire object store is a content-addressed dictionary where the SHA-1 hash is the key), Merkle Tree (nested tree objects), sorted List (flattened tree entries)

import os
import hashlib
import zlib

from .changes import FileMode, TreeEntry, parse_mode
from .errors import ContentUnavailable

_ENTRY_TYPES = {
    FileMode.TREE: 'tree',
    FileMode.GITLINK: 'commit',
}


def objects_dir(repo_root):
    return os.path.join(repo_root, '.pit', 'objects')


def hash_object(repo_root, content, obj_type, write=True): #Hashes content and optionally writes it as an object of the given type ('blob', 'tree', 'commit')
    header = f'{obj_type} {len(content)}\0'.encode()
    data = header + content

    sha1 = hashlib.sha1(data).hexdigest()

    if write:
        object_dir = os.path.join(objects_dir(repo_root), sha1[:2])
        os.makedirs(object_dir, exist_ok=True)
        object_path = os.path.join(object_dir, sha1[2:])

        with open(object_path, 'wb') as f:
            f.write(zlib.compress(data))

    return sha1


def read_object(repo_root, sha1): #Reads an object by its SHA-1 hash and returns its type and content
    object_path = os.path.join(objects_dir(repo_root), sha1[:2], sha1[2:])

    if len(sha1) != 40 or not os.path.exists(object_path):
        raise ContentUnavailable(sha1)

    with open(object_path, 'rb') as f:
        compressed_data = f.read()

    try:
        data = zlib.decompress(compressed_data)
    except zlib.error as e:
        raise ContentUnavailable(sha1, f"corrupt object: {e}") from e

    null_byte_index = data.find(b'\0')
    header = data[:null_byte_index].decode()
    content = data[null_byte_index + 1:]

    obj_type, _ = header.split(' ')

    return obj_type, content


def read_blob(repo_root, sha1): # Content source for the diff engine: the bytes of a blob
    obj_type, content = read_object(repo_root, sha1)
    if obj_type != 'blob':
        raise ContentUnavailable(sha1, f"expected blob, found {obj_type}")
    return content


def find_objects(repo_root, prefix):
    """
    Lists the full ids of every stored object starting with prefix.
    Prefixes shorter than two characters scan the whole store.
    """
    prefix = prefix.lower()
    root = objects_dir(repo_root)
    if len(prefix) >= 2:
        buckets = [prefix[:2]]
    elif os.path.isdir(root):
        buckets = [d for d in os.listdir(root) if d.startswith(prefix)]
    else:
        buckets = []

    found = []
    for bucket in buckets:
        bucket_dir = os.path.join(root, bucket)
        if not os.path.isdir(bucket_dir):
            continue
        for name in os.listdir(bucket_dir):
            object_id = bucket + name
            if object_id.startswith(prefix):
                found.append(object_id)
    return sorted(found)


def build_tree_from_dict(files):
    """
    Builds a nested dictionary from a flat {path: value} mapping.
    Paths use '/' as separator. A value is either a hash (a regular file)
    or a (mode, hash) pair.
    """
    tree = {}
    for path, value in files.items():
        if isinstance(value, str):
            value = (FileMode.REGULAR_FILE, value)
        parts = path.split('/')
        current_level = tree
        for part in parts[:-1]:
            current_level = current_level.setdefault(part, {})
        current_level[parts[-1]] = (FileMode(value[0]), value[1])
    return tree


def write_tree(repo_root, tree_dict): #Recursively writes a tree object from a nested dictionary and returns its hash
    entries = []
    for name, value in sorted(tree_dict.items()):
        if isinstance(value, dict):
            # It's a subdirectory, recurse
            sha1 = write_tree(repo_root, value)
            mode = FileMode.TREE
        else:
            mode, sha1 = value
        entry_type = _ENTRY_TYPES.get(mode, 'blob')

        # Format is: <mode> <type> <hash>\t<name>
        entries.append(f"{int(mode):06o} {entry_type} {sha1}\t{name}".encode())

    tree_content = b'\n'.join(entries)
    return hash_object(repo_root, tree_content, 'tree')


def get_commit_tree_hash(repo_root, commit_hash): # Retrieves the tree hash from a commit object
    if not commit_hash:
        return None
    obj_type, content = read_object(repo_root, commit_hash)
    if obj_type != 'commit':
        raise TypeError(f"Object {commit_hash} is not a commit")
    for line in content.decode().splitlines():
        if line.startswith('tree '):
            return line.split(' ')[1]
    return None


def resolve_tree(repo_root, object_id): # Accepts a commit or a tree id and returns the tree id
    obj_type, _ = read_object(repo_root, object_id)
    if obj_type == 'tree':
        return object_id
    if obj_type == 'commit':
        return get_commit_tree_hash(repo_root, object_id)
    raise TypeError(f"Object {object_id} is a {obj_type}, not a tree or commit")


def read_tree(repo_root, tree_sha): #Reads a tree recursively into a path-sorted list of TreeEntry
    entries = []

    def read_tree_recursive(sha1, path_prefix):
        obj_type, content = read_object(repo_root, sha1)
        if obj_type != 'tree':
            raise TypeError(f"Object {sha1} is not a tree")

        for line in content.decode().splitlines():
            # Line format: <mode> <type> <hash>\t<name>
            header, name = line.split('\t', 1)
            mode_text, _, entry_sha = header.split(' ')
            mode = parse_mode(mode_text)
            current_path = path_prefix + name

            if mode == FileMode.TREE:
                read_tree_recursive(entry_sha, current_path + '/')
            else:
                entries.append(TreeEntry(current_path, mode, entry_sha))

    if tree_sha:
        read_tree_recursive(tree_sha, '')
    entries.sort(key=lambda entry: entry.path)
    return entries


def commit_tree(repo_root, tree_hash, message, parents=(), author="pit <pit@localhost> 0 +0000"): # Writes a commit object pointing at a tree
    lines = [f'tree {tree_hash}']
    for parent in parents:
        lines.append(f'parent {parent}')
    lines.append(f'author {author}')
    lines.append(f'committer {author}')
    lines.append('')
    lines.append(message)
    return hash_object(repo_root, '\n'.join(lines).encode(), 'commit')
