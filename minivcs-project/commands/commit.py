# The command: mini-vcs commit -m "<message>"
# What it does: Creates a permanent, uniquely identified snapshot (a commit) of the last commit's files overlaid with the staged changes
# How it does: It builds the full path -> hash map, hashes it together with the message, timestamp and parent into the commit id, advances the current branch to it and empties the index
# What data structure it uses: Directed Acyclic Graph (each commit links to its parent), Hash Table / Dictionary (the file snapshot)

import sys

from vcs.errors import VCSError
from vcs.repository import open_repository


def run(args):
    try:
        repo = open_repository()
        new_commit = repo.commit(args.message)
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    branch = repo.graph.current_branch
    first_line = new_commit.message.splitlines()[0] if new_commit.message else ''
    print(f"[{branch} {new_commit.short_id}] {first_line}")
