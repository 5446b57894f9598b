# The command: mini-vcs merge <branch-name>
# What it does: Brings another branch's files into the current branch
# How it does: If the other branch is already part of the current history nothing happens. If the current branch is behind (or has no commits yet) it simply moves forward to the other branch's head. Otherwise a new commit is recorded on the current branch whose files are the current ones overlaid by the other branch's (the other branch wins on conflicting paths). The resulting files are written to the working directory
# What data structure it uses: DAG (ancestry walk along parent links; the new commit's parent is the current HEAD), Dictionary (union of the two file maps)

import sys

from vcs.errors import VCSError
from vcs.repository import open_repository


def run(args):
    try:
        repo = open_repository()
        previous_head = repo.graph.head
        merged = repo.merge(args.branch)
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if merged is None:
        print(f"Nothing to merge: branch '{args.branch}' has no commits.")
        return
    if merged.id == previous_head:
        print("Already up to date.")
        return

    if merged.id == repo.graph.branch_head(args.branch):
        print(f"Fast-forward {repo.graph.current_branch} to {merged.short_id}")
        return

    print(f"Merging {args.branch} into {repo.graph.current_branch}")
    print(f"{merged.short_id} {merged.message}")
