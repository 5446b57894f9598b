# What it does: Implements the `.mini-vcsignore` functionality
# What data structure it uses: Set (to store the ignore patterns for efficient, near O(1) average time complexity lookups)

import os
from fnmatch import fnmatch

from . import fileio

IGNORE_FILE = '.mini-vcsignore'


def get_ignored_patterns(repo_root):
    """
    Reads the .mini-vcsignore file and returns a set of glob patterns.
    """
    ignore_file = os.path.join(repo_root, IGNORE_FILE)
    patterns = {fileio.VCS_DIR, '*.pyc', '__pycache__'}  # Always ignore these

    if os.path.exists(ignore_file):
        for line in fileio.read_text(ignore_file).splitlines():
            line = line.strip()
            if line and not line.startswith('#'):
                patterns.add(line.rstrip('/'))
    return patterns


def is_ignored(path, ignore_patterns):  # `path` is repository-relative with '/' separators
    parts = path.split('/')
    for pattern in ignore_patterns:
        if fnmatch(path, pattern) or any(fnmatch(part, pattern) for part in parts):
            return True
    return False
