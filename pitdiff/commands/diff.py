# The command: pit-diff diff [<old> [<new>]] [options]
# What it does: Shows the changes between two trees as a git patch: HEAD vs the working tree, a revision vs the working tree, or two revisions against each other
# How it does: It resolves both sides to path-sorted tree listings, reads the [diff] settings from .pit/config, lets command line flags override them, and hands everything to the DiffFormatter, which writes the patch to stdout
# What data structure it uses: Sorted Lists (of tree entries, merge-joined by the formatter), Dictionary (formatter settings)

import re
import sys
from functools import partial

from ..utils import config as config_utils
from ..utils import objects, repository
from ..utils.errors import PitError
from ..utils.formatter import DiffFormatter
from ..utils.logger import get_logger
from ..utils.worktree import WorkingTree

logger = get_logger(__name__)

# -M without a number keeps the configured rename score
USE_CONFIGURED_SCORE = -1


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a pit repository", file=sys.stderr)
        sys.exit(1)

    try:
        settings = config_utils.get_diff_config(repo_root)
        _apply_overrides(settings, args)
        old_entries, new_entries, load = _resolve_sides(repo_root, args.revisions)

        formatter = DiffFormatter(
            sys.stdout.buffer,
            load,
            resolve=partial(objects.find_objects, repo_root),
            path_filter=args.paths or None,
            old_prefix=args.src_prefix,
            new_prefix=args.dst_prefix,
            **settings,
        )
        written = formatter.format_trees(old_entries, new_entries, delta_filter=args.delta_filter)
        formatter.flush()
        logger.debug("Wrote %d file diffs", written)
    except (PitError, ValueError, TypeError, re.error) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)


def _apply_overrides(settings, args): # Command line flags win over .pit/config
    if args.unified is not None:
        settings['context'] = args.unified
    if args.abbrev is not None:
        settings['abbrev'] = args.abbrev
    if args.find_renames is not None:
        settings['detect_renames'] = True
        if args.find_renames != USE_CONFIGURED_SCORE:
            settings['rename_score'] = args.find_renames
    if args.find_copies:
        settings['detect_renames'] = True
        settings['find_copies'] = True
    if args.no_prefix:
        args.src_prefix = ''
        args.dst_prefix = ''


def _resolve_sides(repo_root, revisions):
    """
    Returns (old entries, new entries, content source) for the requested
    comparison. A missing HEAD commit stands for the empty tree.
    """
    if len(revisions) > 2:
        raise ValueError("at most two revisions can be compared")

    if len(revisions) == 2:
        old_entries = repository.resolve_revision_tree(repo_root, revisions[0])
        new_entries = repository.resolve_revision_tree(repo_root, revisions[1])
        return old_entries, new_entries, partial(objects.read_blob, repo_root)

    if revisions:
        old_entries = repository.resolve_revision_tree(repo_root, revisions[0])
    else:
        head_commit = repository.get_head_commit(repo_root)
        old_entries = repository.resolve_revision_tree(repo_root, head_commit) if head_commit else None

    working_tree = WorkingTree(repo_root)
    return old_entries, working_tree.entries(), working_tree.read

