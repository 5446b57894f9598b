# What it does: Ties the object store, the staging index and the commit graph to one working directory and implements init/add/commit/status/log/checkout/diff
# How it does: A `Repository` is built once per command from the persisted state, mutated in memory and written back whole before the command returns. Nothing is cached between commands
# What data structure it uses: Dictionaries of {path: hash} for the three states (HEAD, index, working tree), Sets (to combine their paths)

import logging
import os
import time
from collections import namedtuple
from datetime import datetime
from enum import Enum

from . import config as config_utils
from . import diff as diff_engine
from . import fileio, ignore, objects
from .commit import Commit
from .errors import CorruptHistory, FileNotFound, IOFailure, NothingToCommit, RepositoryNotInitialized, VCSError
from .graph import DEFAULT_BRANCH, HEAD_REF_PREFIX, CommitGraph, get_head_path, get_heads_dir, validate_branch_name
from .index import StagingIndex

logger = logging.getLogger(__name__)


class FileStatus(Enum):
    UNTRACKED = 'untracked'
    STAGED_NEW = 'staged-new'
    STAGED_MODIFIED = 'staged-modified'
    MODIFIED_SINCE_STAGE = 'modified-since-stage'
    DELETED = 'deleted'
    UNMODIFIED = 'unmodified'


LogEntry = namedtuple('LogEntry', ['commit', 'short_id', 'branches', 'is_head'])


def find_repo_root(path='.'):  # Recursively searches for the control directory to find the repository root
    path = os.path.abspath(path)
    if os.path.isdir(os.path.join(path, fileio.VCS_DIR)):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)


def is_initialized(root):
    return os.path.isdir(os.path.join(root, fileio.VCS_DIR))


def open_repository(path='.'):  # Repository containing `path`, for commands run from inside a working tree
    repo_root = find_repo_root(path)
    if not repo_root:
        raise RepositoryNotInitialized("not a mini-vcs repository (or any of the parent directories)")
    return Repository(repo_root)


class Repository:
    def __init__(self, root):
        self.root = os.path.abspath(root)
        if not is_initialized(self.root):
            raise RepositoryNotInitialized(f"not a mini-vcs repository: {self.root}")

        self.config = config_utils.read_config(self.root)
        try:
            self.compression = config_utils.get_compression(self.config)
        except ValueError as e:
            raise VCSError(f"bad config value: {e}") from e
        self.ignore_patterns = ignore.get_ignored_patterns(self.root)
        self.index = StagingIndex.load(self.root)
        self.graph = CommitGraph.load(self.root)

    @classmethod
    def init(cls, root, initial_branch=DEFAULT_BRANCH):
        """
        Creates the control directory layout under `root` and returns
        (repository, created). Running it on an existing repository
        changes nothing and returns created=False.
        """
        root = os.path.abspath(root)
        if is_initialized(root):
            return cls(root), False

        validate_branch_name(initial_branch)
        try:
            os.makedirs(objects.get_objects_dir(root), exist_ok=True)
            os.makedirs(fileio.vcs_path(root, 'commits'), exist_ok=True)
            os.makedirs(get_heads_dir(root), exist_ok=True)
        except OSError as e:
            raise IOFailure(f"could not create repository in {root}: {e}") from e

        config_utils.write_default_config(root)

        # The branch file stays empty until the first commit
        fileio.atomic_write(os.path.join(get_heads_dir(root), initial_branch), '')
        fileio.atomic_write(get_head_path(root), f"{HEAD_REF_PREFIX}{initial_branch}\n")
        logger.debug("initialized repository in %s", root)
        return cls(root), True

    # Paths

    def relative_path(self, path):
        """
        Repository-relative '/'-separated form of `path` (absolute, or relative
        to the repository root). Raises FileNotFound for paths outside it.
        """
        if '\n' in path or '\r' in path:
            raise FileNotFound(f"path {path!r} contains a line break")
        full_path = os.path.abspath(os.path.join(self.root, path))
        rel_path = os.path.relpath(full_path, self.root)
        if rel_path == '.':
            raise FileNotFound(f"pathspec '{path}' did not match any files")
        if rel_path == '..' or rel_path.startswith('..' + os.sep):
            raise FileNotFound(f"'{path}' is outside repository at {self.root}")
        return rel_path.replace(os.sep, '/')

    def working_path(self, rel_path):
        full_path = os.path.abspath(os.path.join(self.root, *rel_path.split('/')))
        if os.path.commonpath([full_path, self.root]) != self.root:
            raise CorruptHistory(f"tracked path '{rel_path}' escapes the working tree")
        return full_path

    # Staging

    def add(self, path):
        """
        Stores the file's bytes in the object store and stages them.
        Returns (rel_path, hash), or None if the path is ignored.
        """
        rel_path = self.relative_path(path)
        full_path = self.working_path(rel_path)
        if not os.path.isfile(full_path):
            raise FileNotFound(f"pathspec '{path}' did not match any files")

        if ignore.is_ignored(rel_path, self.ignore_patterns):
            logger.debug("skipping ignored path %s", rel_path)
            return None

        content = fileio.read_bytes(full_path)
        hash_val = objects.put(self.root, content, level=self.compression)
        self.index.stage(rel_path, hash_val)
        self.index.save()
        return rel_path, hash_val

    def reset(self, path):  # Unstages one path; returns False if it was not staged
        rel_path = self.relative_path(path)
        if not self.index.unstage(rel_path):
            return False
        self.index.save()
        return True

    # History

    def commit(self, message, timestamp=None):
        """
        Records a new snapshot: the HEAD commit's files overlaid with every
        staged entry, so files committed once stay tracked.
        """
        if len(self.index) == 0:
            raise NothingToCommit("nothing to commit (use \"mini-vcs add\" to stage files)")

        parent_id = self.graph.head
        files = self.graph.head_files()
        files.update(self.index.entries())

        if timestamp is None:
            timestamp = int(time.time())
        new_commit = Commit(message, timestamp, parent_id, files)

        self.graph.add_commit(new_commit)
        self.graph.save(self.root)
        self.index.unstage_all()
        self.index.save()
        return new_commit

    def log(self):  # History from HEAD, oldest first
        head = self.graph.head
        return [
            LogEntry(commit, commit.short_id, self.graph.branch_annotations(commit.id), commit.id == head)
            for commit in self.graph.history_from_head()
        ]

    # Branches

    def branches(self):
        return self.graph.branches()

    def create_branch(self, name):
        self.graph.create_branch(name)
        self.graph.save(self.root)

    def switch_branch(self, name):
        return self.checkout(name)

    def merge(self, name):
        """
        Merges branch `name` into the current branch and writes the merged
        files into the working tree. Returns the resulting commit or None.
        """
        if name == self.graph.current_branch and not self.graph.is_detached:
            raise VCSError(f"cannot merge branch '{name}' into itself")

        previous_head = self.graph.head
        merged = self.graph.merge_branch(name, int(time.time()))
        if merged is None:
            return None
        if merged.id != previous_head:
            self._restore(merged)
        self.graph.save(self.root)
        return merged

    # Working tree

    def checkout(self, target):
        """
        Restores the files of a branch head or a commit (full id or unique
        prefix). A branch becomes current; a commit detaches HEAD. Files
        that the target does not track are left untouched.
        """
        is_branch = target in self.graph.refs
        if is_branch:
            commit_id = self.graph.branch_head(target)
        else:
            commit_id = self.graph.resolve(target)

        target_commit = self.graph.get_commit(commit_id) if commit_id else None
        if target_commit is not None:
            self._restore(target_commit)

        if is_branch:
            self.graph.switch_branch(target)
        else:
            self.graph.checkout_commit(commit_id)
        self.graph.save(self.root)
        return target_commit

    def _restore(self, target_commit):
        # Every blob is fetched before the first write so a missing object leaves the tree untouched
        contents = []
        for path, hash_val in sorted(target_commit.files.items()):
            contents.append((self.working_path(path), objects.get(self.root, hash_val)))

        for full_path, content in contents:
            fileio.atomic_write(full_path, content, mode=fileio.working_file_mode(full_path))
        logger.debug("restored %d files from %s", len(contents), target_commit.short_id)

    def working_tree_files(self):  # {path: hash} of every non-ignored file in the working tree
        working_files = {}
        for dirpath, dirnames, filenames in os.walk(self.root):
            rel_dir = os.path.relpath(dirpath, self.root).replace(os.sep, '/')
            rel_dir = '' if rel_dir == '.' else rel_dir + '/'
            dirnames[:] = sorted(
                d for d in dirnames
                if not ignore.is_ignored(rel_dir + d, self.ignore_patterns)
            )
            for filename in filenames:
                rel_path = rel_dir + filename
                full_path = os.path.join(dirpath, filename)
                if ignore.is_ignored(rel_path, self.ignore_patterns) or not os.path.isfile(full_path):
                    continue
                working_files[rel_path] = objects.hash_content(fileio.read_bytes(full_path))
        return working_files

    def status(self):
        """
        Classifies every path found in HEAD, the index or the working tree.
        Returns a list of (path, FileStatus) sorted by path.
        """
        head_files = self.graph.head_files()
        index_files = dict(self.index.entries())
        working_files = self.working_tree_files()
        for path in set(head_files) | set(index_files):
            # Tracked files stay visible even if they match an ignore pattern
            if path not in working_files:
                full_path = self.working_path(path)
                if os.path.isfile(full_path):
                    working_files[path] = objects.hash_content(fileio.read_bytes(full_path))

        result = []
        for path in sorted(set(head_files) | set(index_files) | set(working_files)):
            result.append((path, _classify(head_files.get(path), index_files.get(path),
                                           working_files.get(path))))
        return result

    def diff(self):
        """
        Line diff between the HEAD version and the working copy of every file
        tracked at HEAD. Only paths with changes are returned, as
        [(path, edit script)]. A deleted working file diffs against empty text.
        """
        changes = []
        for path, hash_val in sorted(self.graph.head_files().items()):
            old_text = diff_engine.decode_text(objects.get(self.root, hash_val))
            full_path = self.working_path(path)
            new_text = ''
            if os.path.isfile(full_path):
                new_text = diff_engine.decode_text(fileio.read_bytes(full_path))

            script = diff_engine.diff(old_text, new_text)
            if diff_engine.has_changes(script):
                changes.append((path, script))
        return changes


def _classify(head_hash, index_hash, working_hash):
    if index_hash is not None:
        if working_hash is None:
            return FileStatus.DELETED
        if working_hash != index_hash:
            return FileStatus.MODIFIED_SINCE_STAGE
        if head_hash is None:
            return FileStatus.STAGED_NEW
        if head_hash != index_hash:
            return FileStatus.STAGED_MODIFIED
        return FileStatus.UNMODIFIED

    if head_hash is not None:
        if working_hash is None:
            return FileStatus.DELETED
        if working_hash != head_hash:
            return FileStatus.MODIFIED_SINCE_STAGE
        return FileStatus.UNMODIFIED

    return FileStatus.UNTRACKED


def format_log(entries, current_branch, detached=False):
    """
    One line per commit: short id, branch labels, message and local time.
    The branch HEAD is on is marked `HEAD -> name`; a detached HEAD is marked `HEAD`.
    """
    lines = []
    for entry in entries:
        labels = []
        if entry.is_head and detached:
            labels.append('HEAD')
        for name in entry.branches:
            if entry.is_head and not detached and name == current_branch:
                labels.append(f"HEAD -> {name}")
            else:
                labels.append(name)

        when = datetime.fromtimestamp(entry.commit.timestamp).strftime('%Y-%m-%d %H:%M:%S')
        annotation = ''.join(f" [{label}]" for label in labels)
        lines.append(f"{entry.short_id}{annotation} - {entry.commit.message} ({when})")
    return lines
