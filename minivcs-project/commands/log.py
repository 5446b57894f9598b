# The command: mini-vcs log
# What it does: Displays the commit history by starting at HEAD and walking back through the parent links
# How it does: The commit graph follows parent pointers from HEAD to the root commit; each commit is printed with its short id, the branches pointing at it, its message and time
# What data structure it uses: It performs a Graph Traversal (a linear walk up the parent chain) on the Directed Acyclic Graph (DAG) formed by the commits

import sys

from vcs.errors import VCSError
from vcs.repository import format_log, open_repository


def run(args):
    try:
        repo = open_repository()
        entries = repo.log()
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if not entries:
        print(f"fatal: your current branch '{repo.graph.current_branch}' does not have any commits yet")
        return

    for line in format_log(entries, repo.graph.current_branch, repo.graph.is_detached):
        print(line)
