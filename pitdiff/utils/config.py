# What it does: Manages all read/write operations for the `.pit/config` file and turns its [diff] section into formatter settings
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import os

from .abbrev import DEFAULT_ABBREV, MIN_ABBREV
from .hunks import DEFAULT_CONTEXT
from .renames import DEFAULT_RENAME_LIMIT, DEFAULT_RENAME_SCORE
from .repository import find_repo_root
from .sequence import FIRST_FEW_BYTES

# config key -> (formatter keyword, parser)
_DIFF_KEYS = {
    'context': ('context', 'int'),
    'abbrev': ('abbrev', 'int'),
    'renames': ('detect_renames', 'bool'),
    'renamescore': ('rename_score', 'int'),
    'renamelimit': ('rename_limit', 'int'),
    'binaryscan': ('binary_scan', 'int'),
}

DIFF_DEFAULTS = {
    'context': DEFAULT_CONTEXT,
    'abbrev': DEFAULT_ABBREV,
    'detect_renames': False,
    'rename_score': DEFAULT_RENAME_SCORE,
    'rename_limit': DEFAULT_RENAME_LIMIT,
    'binary_scan': FIRST_FEW_BYTES,
}


def get_config_path(repo_root):  # Returns the path to the config file within the repository
    return os.path.join(repo_root, '.pit', 'config')


def read_config(repo_root=None): # Reads and returns the configuration as a ConfigParser object
    if repo_root is None:
        repo_root = find_repo_root()
    config = configparser.ConfigParser()
    if not repo_root:
        return config

    config_path = get_config_path(repo_root)
    if os.path.exists(config_path):
        config.read(config_path)
    return config


def write_config(key, value, repo_root=None): # Sets a configuration key to a value and writes it to the config file
    if repo_root is None:
        repo_root = find_repo_root()
    if not repo_root:
        raise FileNotFoundError("Not a Pit repository.")

    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError("Error: Invalid key format. Should be 'section.key'.")

    if section == 'diff':
        _check_diff_value(option, value)

    config_path = get_config_path(repo_root)
    config = configparser.ConfigParser()
    if os.path.exists(config_path):
        config.read(config_path)

    if not config.has_section(section):
        config.add_section(section)

    config.set(section, option, value)

    with open(config_path, 'w') as configfile:
        config.write(configfile)


def diff_setting_names(): # The keys the [diff] section understands, as written in .pit/config
    return sorted(_DIFF_KEYS)


def _check_diff_value(option, value): # Rejects values the diff settings could never parse
    entry = _DIFF_KEYS.get(option.lower())
    if entry is None:
        raise ValueError(f"Unknown diff setting: diff.{option}")
    config = configparser.ConfigParser()
    config.read_dict({'diff': {option: value}})
    _parse_diff_section(config)


def _parse_diff_section(config):
    settings = {}
    if not config.has_section('diff'):
        return settings
    for option in config.options('diff'):
        entry = _DIFF_KEYS.get(option)
        if entry is None:
            continue
        keyword, kind = entry
        try:
            if kind == 'bool':
                settings[keyword] = config.getboolean('diff', option)
            else:
                settings[keyword] = config.getint('diff', option)
        except ValueError:
            raise ValueError(f"Invalid value for diff.{option}: {config.get('diff', option)!r}")

    if settings.get('context', 0) < 0:
        raise ValueError("diff.context must not be negative")
    if settings.get('abbrev', MIN_ABBREV) < MIN_ABBREV:
        raise ValueError(f"diff.abbrev must be at least {MIN_ABBREV}")
    if not 0 <= settings.get('rename_score', 0) <= 100:
        raise ValueError("diff.renameScore must be between 0 and 100")
    return settings


def get_diff_config(repo_root):
    """
    Returns the formatter settings for a repository: the defaults, overlaid
    with whatever the [diff] section of .pit/config sets.
    """
    settings = dict(DIFF_DEFAULTS)
    settings.update(_parse_diff_section(read_config(repo_root)))
    return settings
