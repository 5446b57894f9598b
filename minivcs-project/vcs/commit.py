# What it does: Defines the immutable commit record and its on-disk encoding
# How it does: A commit's id is the SHA-1 of a canonical text built from its message, timestamp, parent and file map, so recomputing it later proves the record was not altered. Records are encoded with `struct` as length-prefixed UTF-8 strings and big-endian integers
# What data structure it uses: Dictionary (path -> blob hash snapshot), Linked List (each commit points to its parent, forming the history)

import struct
import types

from . import hashing

_LENGTH = struct.Struct('>I')
_TIMESTAMP = struct.Struct('>q')


def compute_commit_id(message, timestamp, parent, files):
    lines = [message, str(int(timestamp)), parent or '']
    text = '\n'.join(lines) + '\n'
    text += ''.join(f"{path}={files[path]}\n" for path in sorted(files))
    return hashing.digest(text.encode('utf-8'))


class Commit:
    """
    One snapshot in the history. `files` is the complete path -> hash map
    of every tracked file, not just the ones changed by this commit.
    """

    def __init__(self, message, timestamp, parent, files, commit_id=None):
        self._message = message
        self._timestamp = int(timestamp)
        self._parent = parent or None
        self._files = dict(files)
        if commit_id is None:
            commit_id = compute_commit_id(message, self._timestamp, self._parent, self._files)
        self._id = commit_id

    @property
    def id(self):
        return self._id

    @property
    def message(self):
        return self._message

    @property
    def timestamp(self):
        return self._timestamp

    @property
    def parent(self):
        return self._parent

    @property
    def files(self):
        return types.MappingProxyType(self._files)

    @property
    def short_id(self):
        return hashing.short_id(self._id)

    def compute_id(self):
        return compute_commit_id(self._message, self._timestamp, self._parent, self._files)

    def verify(self):  # True if the stored id still matches the other fields
        return self.compute_id() == self._id

    def _fields(self):
        return (self._message, self._timestamp, self._parent, sorted(self._files.items()))

    def __eq__(self, other):
        if not isinstance(other, Commit):
            return NotImplemented
        return self._id == other._id and self._fields() == other._fields()

    def __hash__(self):
        return hash(self._id)

    def __repr__(self):
        return (f"Commit(id={self.short_id!r}, message={self._message!r}, "
                f"timestamp={self._timestamp}, parent={hashing.short_id(self._parent)!r}, "
                f"files={len(self._files)})")

    def serialize(self):
        """
        Field order: id, message, timestamp, parent (empty string for the
        root commit), file count, then (path, hash) pairs sorted by path.
        """
        parts = [
            _pack_str(self._id),
            _pack_str(self._message),
            _TIMESTAMP.pack(self._timestamp),
            _pack_str(self._parent or ''),
            _LENGTH.pack(len(self._files)),
        ]
        for path, hash_val in sorted(self._files.items()):
            parts.append(_pack_str(path))
            parts.append(_pack_str(hash_val))
        return b''.join(parts)

    @classmethod
    def deserialize(cls, data):  # Raises ValueError on truncated or malformed input
        reader = _Reader(data)
        commit_id = reader.read_str()
        message = reader.read_str()
        timestamp = reader.read(_TIMESTAMP)
        parent = reader.read_str()
        count = reader.read(_LENGTH)

        files = {}
        for _ in range(count):
            path = reader.read_str()
            files[path] = reader.read_str()

        if not reader.at_end():
            raise ValueError("trailing bytes after commit record")
        return cls(message, timestamp, parent or None, files, commit_id=commit_id)


def _pack_str(value):
    data = value.encode('utf-8')
    return _LENGTH.pack(len(data)) + data


class _Reader:
    def __init__(self, data):
        self.data = data
        self.offset = 0

    def _take(self, size):
        end = self.offset + size
        if end > len(self.data):
            raise ValueError("truncated commit record")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def read(self, fmt):
        return fmt.unpack(self._take(fmt.size))[0]

    def read_str(self):
        length = self.read(_LENGTH)
        return self._take(length).decode('utf-8')

    def at_end(self):
        return self.offset == len(self.data)
