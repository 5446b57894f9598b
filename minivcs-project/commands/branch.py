# The command: mini-vcs branch [<branch-name>]
# What it does: Creates a new branch pointer to the current commit, or if no name is given, lists all existing branches
# How it does: To create a branch, it records the current HEAD commit id under `.mini-vcs/refs/heads/<branch-name>`. To list branches, it prints every branch name, marking the current one with an asterisk
# What data structure it uses: Map / Dictionary (branch names to commit ids), List (to hold branch names for sorting and display)

import sys

from vcs.errors import VCSError
from vcs.hashing import short_id
from vcs.repository import open_repository


def run(args):
    # With no arguments, lists all branches.
    # With an argument, creates a new branch.
    try:
        repo = open_repository()
        if args.name:
            repo.create_branch(args.name)
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if args.name:
        head = repo.graph.head
        if head:
            print(f"Branch '{args.name}' created at commit {short_id(head)}")
        else:
            print(f"Branch '{args.name}' created (no commits yet)")
        return

    current_branch = repo.graph.current_branch
    for branch in repo.branches():
        marker = '*' if branch == current_branch else ' '
        print(f"{marker} {branch}")
