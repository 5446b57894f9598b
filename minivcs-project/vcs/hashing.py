# What it does: Computes the content hash used as the only object identifier (blobs and commits)
# What data structure it uses: None, SHA-1 digest rendered as 40 hex characters

import hashlib

SHORT_ID_LENGTH = 7


def digest(data):  # Returns the SHA-1 hex digest of the exact bytes given
    return hashlib.sha1(data).hexdigest()


def short_id(hash_val):  # First 7 hex characters, for display only
    if not hash_val:
        return hash_val
    return hash_val[:SHORT_ID_LENGTH]
