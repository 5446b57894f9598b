# What it does: Holds the commit history, the branch pointers and HEAD, and persists them under `.mini-vcs`
# How it does: Commits live in `commits/<id>`, each branch in `refs/heads/<name>` (a commit id, or empty before the first commit) and HEAD in `HEAD`. HEAD normally names the current branch (`ref: refs/heads/<name>`); a second line with a bare commit id means HEAD is detached at that commit while the branch stays current
# What data structure it uses: Directed Acyclic Graph (commits linked to their parent), Map / Dictionary (commit id -> commit, branch name -> commit id)

import logging
import os
import re

from . import fileio, hashing
from .commit import Commit
from .errors import (BranchExists, CorruptHistory, DuplicateCommit, InvalidBranchName,
                     UnknownBranch, UnknownCommit)

DEFAULT_BRANCH = 'master'
HEAD_REF_PREFIX = 'ref: refs/heads/'
MIN_PREFIX_LENGTH = 4

_BRANCH_NAME = re.compile(r'^[A-Za-z0-9_][A-Za-z0-9._-]*$')
_HEX = re.compile(r'^[0-9a-f]+$')

logger = logging.getLogger(__name__)


def get_commits_dir(repo_root):
    return fileio.vcs_path(repo_root, 'commits')


def get_heads_dir(repo_root):
    return fileio.vcs_path(repo_root, 'refs', 'heads')


def get_head_path(repo_root):
    return fileio.vcs_path(repo_root, 'HEAD')


def validate_branch_name(name):
    if not name or not _BRANCH_NAME.match(name) or name.endswith('.lock'):
        raise InvalidBranchName(name)


class CommitGraph:
    def __init__(self, current_branch=DEFAULT_BRANCH):
        self.commits = {}
        self.refs = {current_branch: None}
        self.current_branch = current_branch
        self.detached_head = None
        self._unsaved = set()

    @property
    def head(self):  # The commit id HEAD resolves to, or None before the first commit
        if self.detached_head is not None:
            return self.detached_head
        return self.refs.get(self.current_branch)

    @property
    def is_detached(self):
        return self.detached_head is not None

    def add_commit(self, commit):
        """
        Records `commit` and advances the current branch and HEAD to it.
        Adding an identical commit twice is a no-op since ids are content-derived.
        """
        existing = self.commits.get(commit.id)
        if existing is not None and existing != commit:
            raise DuplicateCommit(f"commit {commit.id} already exists with different contents")
        if existing is None:
            self.commits[commit.id] = commit
            self._unsaved.add(commit.id)

        self.refs[self.current_branch] = commit.id
        self.detached_head = None
        logger.debug("branch %s -> %s", self.current_branch, commit.short_id)

    def get_commit(self, commit_id):
        commit = self.commits.get(commit_id)
        if commit is None:
            raise UnknownCommit(f"unknown commit: {commit_id}")
        return commit

    def history_from_head(self):  # Oldest first
        history = []
        current = self.head
        while current is not None:
            commit = self.commits.get(current)
            if commit is None:
                raise CorruptHistory(f"commit {current} is referenced but missing from the store")
            history.append(commit)
            current = commit.parent
        history.reverse()
        return history

    def head_files(self):  # File map of the HEAD commit, empty before the first commit
        if self.head is None:
            return {}
        return dict(self.get_commit(self.head).files)

    def create_branch(self, name):
        validate_branch_name(name)
        if name in self.refs:
            raise BranchExists(name)
        self.refs[name] = self.head
        logger.debug("created branch %s at %s", name, hashing.short_id(self.head))

    def switch_branch(self, name):
        if name not in self.refs:
            raise UnknownBranch(name)
        self.current_branch = name
        self.detached_head = None

    def checkout_commit(self, commit_id):  # Detaches HEAD; the current branch is unchanged
        self.get_commit(commit_id)
        self.detached_head = commit_id

    def is_ancestor(self, ancestor_id, commit_id):  # True if `ancestor_id` is `commit_id` or one of its parents
        current = commit_id
        while current is not None:
            if current == ancestor_id:
                return True
            commit = self.commits.get(current)
            if commit is None:
                raise CorruptHistory(f"commit {current} is referenced but missing from the store")
            current = commit.parent
        return False

    def merge_branch(self, name, timestamp):
        """
        Merges branch `name` into the current branch.
        Returns the commit HEAD ends up on, or None if `name` has no commits.
        - `name` already in HEAD's history: nothing changes, HEAD is returned.
        - HEAD in `name`'s history (or no HEAD): fast-forward to `name`'s head.
        - Otherwise a merge commit is recorded whose files are HEAD's overlaid
          by `name`'s, so `name` wins on conflicting paths.
        """
        if name not in self.refs:
            raise UnknownBranch(name)

        other_id = self.refs[name]
        if other_id is None:
            return None
        other = self.get_commit(other_id)

        if self.head is not None and self.is_ancestor(other_id, self.head):
            logger.debug("branch %s is already merged into %s", name, hashing.short_id(self.head))
            return self.get_commit(self.head)

        if self.head is None or self.is_ancestor(self.head, other_id):
            self.refs[self.current_branch] = other_id
            self.detached_head = None
            logger.debug("fast-forward %s -> %s", self.current_branch, other.short_id)
            return other

        current = self.get_commit(self.head)
        files = dict(current.files)
        files.update(other.files)

        merge_commit = Commit(f"Merge branch '{name}' into {self.current_branch}",
                              timestamp, current.id, files)
        self.add_commit(merge_commit)
        return merge_commit

    def resolve(self, ref):
        """
        Resolves a full commit id or an unambiguous id prefix of at least
        MIN_PREFIX_LENGTH characters to a commit id.
        """
        if ref in self.commits:
            return ref

        prefix = ref.lower()
        if len(prefix) >= MIN_PREFIX_LENGTH and _HEX.match(prefix):
            matches = [commit_id for commit_id in self.commits if commit_id.startswith(prefix)]
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                raise UnknownCommit(f"short commit id '{ref}' is ambiguous")

        raise UnknownCommit(f"unknown commit: {ref}")

    def branches(self):
        return sorted(self.refs)

    def branch_head(self, name):
        if name not in self.refs:
            raise UnknownBranch(name)
        return self.refs[name]

    def branch_annotations(self, commit_id):  # Names of the branches pointing at `commit_id`
        return sorted(name for name, target in self.refs.items() if target == commit_id)

    def head_status(self):  # User-friendly description of HEAD
        if self.is_detached:
            return f"HEAD detached at {hashing.short_id(self.detached_head)} (branch {self.current_branch})"
        return f"On branch {self.current_branch}"

    @classmethod
    def load(cls, repo_root):
        """
        Reads every commit, branch and HEAD from disk. Raises CorruptHistory if
        a commit fails its integrity check or a ref names a missing commit.
        """
        current_branch, detached_head = _read_head(repo_root)
        graph = cls(current_branch)
        graph.refs = {}

        commits_dir = get_commits_dir(repo_root)
        for name in fileio.list_entries(commits_dir):
            commit = _read_commit(os.path.join(commits_dir, name))
            if commit.id != name or not commit.verify():
                raise CorruptHistory(f"commit {name} failed its integrity check")
            graph.commits[commit.id] = commit

        heads_dir = get_heads_dir(repo_root)
        for name in fileio.list_entries(heads_dir):
            target = fileio.read_text(os.path.join(heads_dir, name)).strip() or None
            if target is not None and target not in graph.commits:
                raise CorruptHistory(f"branch '{name}' points to missing commit {target}")
            graph.refs[name] = target

        if current_branch not in graph.refs:
            raise CorruptHistory(f"HEAD points to missing branch '{current_branch}'")
        if detached_head is not None and detached_head not in graph.commits:
            raise CorruptHistory(f"HEAD points to missing commit {detached_head}")
        graph.detached_head = detached_head
        return graph

    def save(self, repo_root):  # New commits first, then refs, then HEAD
        commits_dir = get_commits_dir(repo_root)
        for commit_id in sorted(self._unsaved):
            commit_path = os.path.join(commits_dir, commit_id)
            if not os.path.exists(commit_path):
                fileio.atomic_write(commit_path, self.commits[commit_id].serialize())
        self._unsaved.clear()

        heads_dir = get_heads_dir(repo_root)
        for name, target in self.refs.items():
            branch_path = os.path.join(heads_dir, name)
            content = f"{target}\n" if target else ''
            if os.path.exists(branch_path) and fileio.read_text(branch_path) == content:
                continue
            fileio.atomic_write(branch_path, content)

        head = f"{HEAD_REF_PREFIX}{self.current_branch}\n"
        if self.detached_head is not None:
            head += f"{self.detached_head}\n"
        fileio.atomic_write(get_head_path(repo_root), head)


def _read_head(repo_root):  # Returns (current branch, detached commit id or None)
    head_path = get_head_path(repo_root)
    if not os.path.exists(head_path):
        return DEFAULT_BRANCH, None

    current_branch = None
    detached_head = None
    for line in fileio.read_text(head_path).splitlines():
        line = line.strip()
        if line.startswith(HEAD_REF_PREFIX):
            current_branch = line[len(HEAD_REF_PREFIX):]
        elif line:
            detached_head = line

    if current_branch is None:
        raise CorruptHistory("HEAD does not name a current branch")
    return current_branch, detached_head


def _read_commit(path):
    try:
        return Commit.deserialize(fileio.read_bytes(path))
    except ValueError as e:
        raise CorruptHistory(f"commit file {os.path.basename(path)} is damaged: {e}") from e
