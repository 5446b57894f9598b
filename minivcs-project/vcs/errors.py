# What it does: Defines every error kind the engine can raise
# How it does: A single base class (VCSError) lets the command layer recover all logical and disk failures in one place and print them as a user-facing message
# What data structure it uses: Class hierarchy


class VCSError(Exception):
    """Base class for every error reported to the user."""


class RepositoryNotInitialized(VCSError):
    pass


class ObjectNotFound(VCSError):
    def __init__(self, hash_val):
        super().__init__(f"object not found: {hash_val}")
        self.hash = hash_val


class UnknownCommit(VCSError):
    pass


class UnknownBranch(VCSError):
    def __init__(self, name):
        super().__init__(f"branch '{name}' does not exist")
        self.name = name


class BranchExists(VCSError):
    def __init__(self, name):
        super().__init__(f"a branch named '{name}' already exists")
        self.name = name


class InvalidBranchName(VCSError):
    def __init__(self, name):
        super().__init__(f"'{name}' is not a valid branch name")
        self.name = name


class DuplicateCommit(VCSError):
    pass


class CorruptHistory(VCSError):
    """A ref, HEAD or parent pointer names a commit that is missing or damaged."""


class NothingToCommit(VCSError):
    pass


class FileNotFound(VCSError):
    pass


class IOFailure(VCSError):
    """Disk read/write failure, as opposed to a logical error."""
