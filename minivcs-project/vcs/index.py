# What it does: Provides the staging area, the set of (path, hash) pairs that the next commit will record
# How it does: `read_index`/`write_index` handle the `.mini-vcs/index` file format (one `path=hash` line per entry, sorted by path); `StagingIndex` keeps the entries in memory while a command runs and writes them back whole
# What data structure it uses: Dictionary (mapping file paths to blob hashes)

import logging
import os

from . import fileio

logger = logging.getLogger(__name__)


def get_index_path(repo_root):
    return fileio.vcs_path(repo_root, 'index')


def read_index(repo_root):
    """
    Reads the index file and returns a dictionary {path: hash}.
    A missing index file is an empty index. The split is on the last '='
    so paths may contain '=' themselves.
    """
    index_path = get_index_path(repo_root)
    index_files = {}
    if not os.path.exists(index_path):
        return index_files

    for line in fileio.read_text(index_path).splitlines():
        if '=' not in line:
            continue
        path, hash_val = line.rsplit('=', 1)
        index_files[path] = hash_val.strip()
    return index_files


def write_index(repo_root, index_dict):
    content = ''.join(f"{path}={index_dict[path]}\n" for path in sorted(index_dict))
    fileio.atomic_write(get_index_path(repo_root), content)
    logger.debug("index saved with %d entries", len(index_dict))


class StagingIndex:
    def __init__(self, repo_root, entries=None):
        self.repo_root = repo_root
        self._entries = dict(entries or {})

    @classmethod
    def load(cls, repo_root):
        return cls(repo_root, read_index(repo_root))

    def save(self):
        write_index(self.repo_root, self._entries)

    def stage(self, path, hash_val):  # Inserts or overwrites the entry for `path`
        self._entries[path] = hash_val

    def unstage(self, path):  # Returns False if `path` was not staged
        if path not in self._entries:
            return False
        del self._entries[path]
        return True

    def unstage_all(self):
        self._entries.clear()

    def entries(self):  # (path, hash) pairs sorted by path
        return sorted(self._entries.items())

    def get(self, path):
        return self._entries.get(path)

    def __contains__(self, path):
        return path in self._entries

    def __len__(self):
        return len(self._entries)
