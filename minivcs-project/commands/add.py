# The command: mini-vcs add <file>...
# What it does: Takes a snapshot of files from the working directory and stages them for the next commit by updating the index
# How it does: For each file it stores the bytes in the object store (creating a blob keyed by its hash) and records the path and hash in the index, which is written back after every staged file
# What data structure it uses: Hash Table / Dictionary (the index in memory), List (of files to add), and a Tree Traversal (when expanding `.` using os.walk)

import os
import sys

from vcs.errors import FileNotFound, VCSError
from vcs.repository import open_repository


def run(args):
    try:
        repo = open_repository()
    except VCSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    failed = False
    for file_path in _expand_files(args.files, repo):
        try:
            added = repo.add(file_path)
        except FileNotFound as e:
            print(f"fatal: {e}", file=sys.stderr)
            failed = True
            continue
        except VCSError as e:
            print(f"Error adding file {file_path}: {e}", file=sys.stderr)
            sys.exit(1)

        if added:
            print(f"Added '{added[0]}' to the index.")

    if failed:
        sys.exit(1)


def _expand_files(file_args, repo):
    """
    Expands '.' into every non-ignored file under the current directory.
    Other arguments are taken relative to the current directory.
    """
    files = []
    for file_arg in file_args:
        if os.path.normpath(file_arg) != '.':
            files.append(os.path.abspath(file_arg))
            continue

        cwd = os.path.relpath(os.getcwd(), repo.root).replace(os.sep, '/')
        prefix = '' if cwd == '.' else cwd + '/'
        for path in sorted(repo.working_tree_files()):
            if path.startswith(prefix):
                files.append(os.path.join(repo.root, *path.split('/')))
    return files
