# The command: pit-diff config <key> <value>
# What it does: Sets a configuration value in .pit/config, for example diff.context or diff.renames
# How it does: Hands the key and value to `write_config` in `utils/config.py`, which checks [diff] values before anything is written. A rejected [diff] setting is reported together with the settings that section accepts
# What data structure it uses: None directly, the INI map lives in `utils/config.py`

import sys

from ..utils import config as config_utils


def run(args):
    try:
        config_utils.write_config(args.key, args.value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.key.lower().startswith('diff.'):
            print(f"Valid diff settings: {', '.join(config_utils.diff_setting_names())}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Set {args.key} to '{args.value}'")
