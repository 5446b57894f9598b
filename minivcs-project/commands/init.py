# The command: mini-vcs init [<directory>]
# What it does: Initializes a new, empty repository by creating the hidden `.mini-vcs` directory and its internal structure
# How it does: It creates the `objects`, `commits` and `refs/heads` subdirectories, a default config, an empty branch file and a `HEAD` file pointing at that branch. Running it on an existing repository is a no-op with a notice
# What data structure it uses: Tree (the file system directory structure is a tree). It also lays the foundation for a Hash Table (the object database) and a Directed Acyclic Graph (the commit history)

import os
import sys

from vcs.errors import VCSError
from vcs.repository import Repository


def run(args):
    directory = os.path.abspath(args.directory or os.getcwd())
    try:
        repo, created = Repository.init(directory, initial_branch=args.initial_branch)
    except VCSError as e:
        print(f"Error initializing repository: {e}", file=sys.stderr)
        sys.exit(1)

    vcs_dir = os.path.join(repo.root, '.mini-vcs')
    if created:
        print(f"Initialized empty mini-vcs repository in {vcs_dir}/")
    else:
        print(f"mini-vcs repository already exists in {vcs_dir}/")
