# The command: mini-vcs diff
# What it does: Shows line-by-line changes between the HEAD commit and the working directory for every file tracked at HEAD
# How it does: For each tracked path the HEAD blob and the working copy are passed to the LCS diff engine; paths with changes are printed under a header, one `+`/`-`/` ` prefixed line per entry
# What data structure it uses: List / Array (of file lines and edits)

import sys

from vcs import diff as diff_engine
from vcs.errors import VCSError
from vcs.repository import open_repository


def run(args):
    try:
        repo = open_repository()
        changes = repo.diff()
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    for path, script in changes:
        for line in diff_engine.format_diff(path, script):
            print(line)
