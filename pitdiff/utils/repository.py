# What it does: Locates the repository and turns the revision names a user types (HEAD, a branch, a full or abbreviated id) into object ids
# How it does: `find_repo_root` walks up the directory tree to locate the `.pit` directory. HEAD and branch names are read from `HEAD` and `refs/heads`; anything else is treated as a hex id and expanded against the object store
# What data structure it uses: Uses recursion (specifically, linear recursion) to find the repo root. Conceptually, it follows pointers (the `HEAD` file and branch files)

import os

from . import abbrev, objects


def find_repo_root(path='.'): # Recursively searches for the .pit directory to find the repository root
    path = os.path.abspath(path)
    pit_dir = os.path.join(path, '.pit')
    if os.path.isdir(pit_dir):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)


def get_head_commit(repo_root): # Retrieves the commit hash that HEAD points to, or None if there are no commits
    head_path = os.path.join(repo_root, '.pit', 'HEAD')
    if not os.path.exists(head_path):
        return None
    with open(head_path, 'r') as f:
        head_content = f.read().strip()
    if head_content.startswith('ref: '):
        ref_path = head_content.split(' ', 1)[1]
        branch_path = os.path.join(repo_root, '.pit', *ref_path.split('/'))
        if not os.path.exists(branch_path) or os.path.getsize(branch_path) == 0:
            return None
        with open(branch_path, 'r') as f:
            return f.read().strip()
    return head_content or None


def get_branch_commit(repo_root, branch_name): # Retrieves the commit hash that a given branch points to, or None if the branch doesn't exist
    branch_path = os.path.join(repo_root, '.pit', 'refs', 'heads', branch_name)
    if not os.path.isfile(branch_path):
        return None
    with open(branch_path, 'r') as f:
        return f.read().strip() or None


def resolve_revision(repo_root, revision):
    """
    Resolves HEAD, a branch name, or a (possibly abbreviated) hex id to a
    full object id. Raises ContentUnavailable when nothing matches and
    AmbiguousObjectId when an abbreviation matches several objects.
    """
    if revision == 'HEAD':
        commit = get_head_commit(repo_root)
        if commit is None:
            raise ValueError("HEAD does not point to a commit yet")
        return commit

    branch_commit = get_branch_commit(repo_root, revision)
    if branch_commit:
        return branch_commit

    return abbrev.expand(revision, lambda prefix: objects.find_objects(repo_root, prefix))


def resolve_revision_tree(repo_root, revision): # Resolves a revision straight to the listing of its tree
    object_id = resolve_revision(repo_root, revision)
    return objects.read_tree(repo_root, objects.resolve_tree(repo_root, object_id))
