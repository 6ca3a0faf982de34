import argparse

from .commands import config, diff
from .utils.logger import setup_logging


# The main entry point for pit-diff
def main(argv=None):
    setup_logging()

    # The main parser
    parser = argparse.ArgumentParser(description="pit-diff: git patches for pit repositories.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: diff
    diff_parser = subparsers.add_parser("diff", help="Show changes between revisions or the working tree.")
    diff_parser.add_argument("revisions", nargs="*", help="Zero, one or two revisions to compare (HEAD, a branch or an id).")
    diff_parser.add_argument("--path", dest="paths", action="append", default=[], help="Limit the diff to this path. May be repeated.")
    diff_parser.add_argument("-U", "--unified", type=int, help="Number of context lines around each change.")
    diff_parser.add_argument("--abbrev", type=int, help="Number of hex digits on the index line.")
    diff_parser.add_argument("-M", "--find-renames", type=int, nargs="?", const=diff.USE_CONFIGURED_SCORE,
                             metavar="SCORE", help="Detect renames, optionally with a similarity threshold.")
    diff_parser.add_argument("-C", "--find-copies", action="store_true", help="Detect copies as well as renames.")
    diff_parser.add_argument("-G", "--delta-filter", help="Only show files whose changed lines match this regex.")
    diff_parser.add_argument("--src-prefix", default="a/", help="Prefix for old paths.")
    diff_parser.add_argument("--dst-prefix", default="b/", help="Prefix for new paths.")
    diff_parser.add_argument("--no-prefix", action="store_true", help="Show paths without a prefix.")
    diff_parser.set_defaults(func=diff.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Set a configuration value.")
    config_parser.add_argument("key", help="The configuration key (e.g., diff.context).")
    config_parser.add_argument("value", help="The configuration value.")
    config_parser.set_defaults(func=config.run)

    # Parse the arguments
    args = parser.parse_args(argv)

    # If a command was specified, run its function
    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
