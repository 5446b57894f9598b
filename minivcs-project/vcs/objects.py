# What it does: Manages the object database, the write-once store of every blob ever added
# How it does: It implements a content-addressed storage system. `put` hashes the raw bytes, compresses them with zlib and writes them to `objects/<hash>` unless that file already exists. `get` reads and decompresses an object by its hash
# What data structure it uses: Hash Table / Dictionary (the whole store is a content-addressed dictionary on disk where the SHA-1 hash is the key)

import logging
import os
import zlib

from . import fileio, hashing
from .errors import IOFailure, ObjectNotFound

DEFAULT_COMPRESSION = 6

logger = logging.getLogger(__name__)


def get_objects_dir(repo_root):
    return fileio.vcs_path(repo_root, 'objects')


def _object_path(repo_root, hash_val):
    return os.path.join(get_objects_dir(repo_root), hash_val)


def hash_content(content):  # Hash only, nothing is written (used to compare working files)
    return hashing.digest(content)


def put(repo_root, content, level=DEFAULT_COMPRESSION):
    """
    Stores `content` and returns its hash. Writing the same content twice
    is a no-op the second time. The name is the hash of the uncompressed
    bytes, so the compression level never changes an object's identity.
    """
    hash_val = hashing.digest(content)
    object_path = _object_path(repo_root, hash_val)

    if os.path.exists(object_path):
        logger.debug("object %s already stored, skipped", hashing.short_id(hash_val))
        return hash_val

    fileio.atomic_write(object_path, zlib.compress(content, level))
    logger.debug("stored object %s (%d bytes)", hashing.short_id(hash_val), len(content))
    return hash_val


def get(repo_root, hash_val):  # Returns the original bytes of an object, or raises ObjectNotFound
    object_path = _object_path(repo_root, hash_val)
    if not os.path.isfile(object_path):
        raise ObjectNotFound(hash_val)

    compressed = fileio.read_bytes(object_path)
    try:
        content = zlib.decompress(compressed)
    except zlib.error as e:
        raise IOFailure(f"object {hash_val} is damaged: {e}") from e

    if hashing.digest(content) != hash_val:
        raise IOFailure(f"object {hash_val} does not match its hash")
    return content


def contains(repo_root, hash_val):
    return os.path.isfile(_object_path(repo_root, hash_val))
