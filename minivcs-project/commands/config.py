# The command: mini-vcs config <key> <value>
# What it does: A user-facing command to set a configuration key-value pair (e.g., core.compression)
# How it does: It passes the key and value to `vcs/config.py`, which validates known keys and rewrites the INI file
# What data structure it uses: None directly, but it provides the interface to the underlying Map / Dictionary structure managed by `vcs/config.py`

import sys

from vcs import config as config_utils
from vcs.errors import RepositoryNotInitialized, VCSError
from vcs.repository import find_repo_root


def run(args):
    try:  # Set the configuration key-value pair
        repo_root = find_repo_root()
        if not repo_root:
            raise RepositoryNotInitialized("not a mini-vcs repository")
        config_utils.write_config(repo_root, args.key, args.value)
        print(f"Set {args.key} to '{args.value}'")
    except (VCSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
