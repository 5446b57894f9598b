# What it does: Manages all read/write operations for the `.mini-vcs/config` file
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import io
import os

from . import fileio
from .errors import VCSError

DEFAULTS = {
    'core': {
        'compression': '6',
    },
    'status': {
        'showuntracked': 'true',
    },
}


def get_config_path(repo_root):  # Returns the path to the config file within the repository
    return fileio.vcs_path(repo_root, 'config')


def read_config(repo_root):  # Reads and returns the configuration as a ConfigParser object
    config = configparser.ConfigParser()
    config.read_dict(DEFAULTS)
    config_path = get_config_path(repo_root)
    if os.path.exists(config_path):
        try:
            config.read_string(fileio.read_text(config_path))
        except configparser.Error as e:
            raise VCSError(f"bad config file {config_path}: {e}") from e
    return config


def write_default_config(repo_root):
    config = configparser.ConfigParser()
    config.read_dict(DEFAULTS)
    _write(repo_root, config)


def write_config(repo_root, key, value):  # Sets a `section.option` key to a value and writes the config file
    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError("Invalid key format. Should be 'section.key'.")
    section, option = section.lower(), option.lower()

    if (section, option) == ('core', 'compression'):
        _parse_compression(value)
    elif (section, option) == ('status', 'showuntracked'):
        if value.lower() not in configparser.ConfigParser.BOOLEAN_STATES:
            raise ValueError(f"'{value}' is not a boolean")

    config = read_config(repo_root)
    if not config.has_section(section):
        config.add_section(section)
    config.set(section, option, value)
    _write(repo_root, config)


def get_compression(config):  # zlib level used by the object store
    return _parse_compression(config.get('core', 'compression'))


def show_untracked(config):
    return config.getboolean('status', 'showuntracked')


def _parse_compression(value):
    try:
        level = int(value)
    except ValueError:
        raise ValueError(f"core.compression must be an integer, got '{value}'")
    if not 0 <= level <= 9:
        raise ValueError(f"core.compression must be between 0 and 9, got {level}")
    return level


def _write(repo_root, config):
    buffer = io.StringIO()
    config.write(buffer)
    fileio.atomic_write(get_config_path(repo_root), buffer.getvalue())
