# The command: mini-vcs status
# What it does: Provides a summary of the repository state by comparing the HEAD commit, the index (staging area) and the working directory
# How it does: The repository classifies every path seen in any of the three states; this command groups the paths by their status and prints them
# What data structure it uses: Hash Table / Dictionary (status -> list of paths)

import sys

from vcs import config as config_utils
from vcs.errors import VCSError
from vcs.repository import FileStatus, open_repository

SECTIONS = [
    ("Changes to be committed", [FileStatus.STAGED_NEW, FileStatus.STAGED_MODIFIED]),
    ("Changes not staged for commit", [FileStatus.MODIFIED_SINCE_STAGE, FileStatus.DELETED]),
]

LABELS = {
    FileStatus.STAGED_NEW: 'new file',
    FileStatus.STAGED_MODIFIED: 'modified',
    FileStatus.MODIFIED_SINCE_STAGE: 'modified',
    FileStatus.DELETED: 'deleted',
}


def run(args):  # Prints the HEAD description, then staged, unstaged and untracked paths
    try:
        repo = open_repository()
        entries = repo.status()
        show_untracked = config_utils.show_untracked(repo.config)
    except (VCSError, ValueError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    print(repo.graph.head_status())

    by_status = {}
    for path, file_status in entries:
        by_status.setdefault(file_status, []).append(path)

    for header, statuses in SECTIONS:
        lines = [
            f"\t{LABELS[file_status]}:   {path}"
            for file_status in statuses
            for path in by_status.get(file_status, [])
        ]
        if lines:
            print(f"\n{header}:")
            print("\n".join(lines))

    untracked = by_status.get(FileStatus.UNTRACKED, [])
    if untracked and show_untracked:
        print("\nUntracked files:")
        print("  (use \"mini-vcs add <file>...\" to include in what will be committed)")
        for path in untracked:
            print(f"\t{path}")

    if not any(status is not FileStatus.UNMODIFIED for _, status in entries):
        print("\nnothing to commit, working tree clean")
