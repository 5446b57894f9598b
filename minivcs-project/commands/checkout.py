# The command: mini-vcs checkout <commit-id> | <branch-name>
# What it does: Restores the working directory to the files of a commit (detaching HEAD) or of a branch head (switching to that branch)
# How it does: The target is resolved first (branch name, full commit id or unique id prefix); then every blob of the target commit is read from the object store and written over the working file. Files the target does not track are left alone
# What data structure it uses: Hash Table (object store lookup), Dictionary (the commit's path -> hash map)

import sys

from vcs.errors import VCSError
from vcs.repository import open_repository


def run(args):
    try:
        repo = open_repository()
        if args.target == repo.graph.current_branch and not repo.graph.is_detached:
            print(f"Already on '{args.target}'")
            return
        is_branch = args.target in repo.graph.refs
        target_commit = repo.checkout(args.target)
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if is_branch:
        print(f"Switched to branch '{args.target}'")
    else:
        print(f"HEAD is now at {target_commit.short_id} {target_commit.message}")
    if target_commit is not None:
        print(f"Restored {len(target_commit.files)} file(s).")
