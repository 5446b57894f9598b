# The command: mini-vcs reset <file>...
# What it does: Unstages files by removing them from the staging area (the index). It is the opposite of `mini-vcs add`
# How it does: Each path is dropped from the in-memory index, which is then written back whole
# What data structure it uses: Dictionary (the index)

import os
import sys

from vcs.errors import VCSError
from vcs.repository import open_repository


def run(args):  # Executes the reset command to unstage files
    try:
        repo = open_repository()
        unstaged = [f for f in args.files if repo.reset(os.path.abspath(f))]
    except VCSError as e:
        print(f"Error resetting files: {e}", file=sys.stderr)
        sys.exit(1)

    if not unstaged:
        print("Nothing to unstage.")
        return

    print("Unstaged changes after reset:")
    for file_path in unstaged:
        print(f" M {file_path}")
