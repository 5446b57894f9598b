# This file makes the 'vcs' directory a Python package
# The engine: hashing, object store, diff, staging index, commit graph and the repository controller
