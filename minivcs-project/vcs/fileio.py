# What it does: Knows where everything lives inside the `.mini-vcs` control directory and writes files so a crash never leaves them half-written
# How it does: Every write goes to a temporary file in the destination directory, is flushed to disk, then moved over the target with `os.replace` (atomic on POSIX and Windows)
# What data structure it uses: None, plain paths and byte buffers

import logging
import os
import tempfile

from .errors import IOFailure

VCS_DIR = '.mini-vcs'
TEMP_PREFIX = '.tmp-'

logger = logging.getLogger(__name__)


def vcs_path(repo_root, *parts):  # Path of an entry inside the control directory
    return os.path.join(repo_root, VCS_DIR, *parts)


def atomic_write(path, data, mode=None):
    """
    Replaces `path` with `data` (bytes or str) in one step.
    Parent directories are created as needed. The file keeps the private
    mode of a temporary file unless `mode` is given.
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    directory = os.path.dirname(path) or '.'
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=TEMP_PREFIX)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if mode is not None:
                os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
    except OSError as e:
        raise IOFailure(f"could not write {path}: {e}") from e

    logger.debug("wrote %s (%d bytes)", path, len(data))


def read_bytes(path):
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise IOFailure(f"could not read {path}: {e}") from e


def read_text(path):
    return read_bytes(path).decode('utf-8')


def is_temp_file(name):  # Leftovers of an interrupted atomic_write are skipped when listing directories
    return name.startswith(TEMP_PREFIX)


def list_entries(directory):  # Sorted names in `directory`, empty if it does not exist
    if not os.path.isdir(directory):
        return []
    try:
        names = os.listdir(directory)
    except OSError as e:
        raise IOFailure(f"could not list {directory}: {e}") from e
    return sorted(name for name in names if not is_temp_file(name))


def working_file_mode(path):
    """
    Mode for a working-tree file about to be (re)written: the current mode
    of `path` if it exists, otherwise the umask default for new files.
    """
    try:
        return os.stat(path).st_mode & 0o7777
    except FileNotFoundError:
        pass
    except OSError as e:
        raise IOFailure(f"could not stat {path}: {e}") from e

    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
