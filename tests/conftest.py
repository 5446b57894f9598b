# Shared pytest fixtures for mini-vcs tests

import pytest
import os
import sys
import shutil
import tempfile

# Add minivcs-project to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'minivcs-project'))

from vcs.repository import Repository


@pytest.fixture
def temp_dir():
    # Creates a temporary directory that is cleaned up after the test
    # Also saves/restores cwd to prevent issues when tests change directories
    original_dir = os.getcwd()
    tmp = os.path.realpath(tempfile.mkdtemp())
    yield tmp
    os.chdir(original_dir)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_repo(temp_dir):
    # Creates an initialized repository in a temporary directory and moves into it
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    Repository.init(temp_dir)

    yield temp_dir

    os.chdir(original_dir)


@pytest.fixture
def repo_with_file(temp_repo):
    # Creates a repo with a single file (not staged)
    write_file(temp_repo, 'f.txt', 'hello\n')
    return temp_repo


@pytest.fixture
def repo_with_commit(temp_repo):
    # Creates a repo with one committed file
    write_file(temp_repo, 'README.md', '# Test Project\n')

    repo = Repository(temp_repo)
    repo.add('README.md')
    commit = repo.commit('Initial commit', timestamp=1700000000)

    return temp_repo, commit.id


@pytest.fixture
def repo_with_branches(repo_with_commit):
    # Creates a repo with master and a feature branch at the same commit
    repo_root, initial_commit = repo_with_commit

    Repository(repo_root).create_branch('feature')

    return repo_root, initial_commit


def write_file(root, rel_path, content):
    full_path = os.path.join(root, *rel_path.split('/'))
    os.makedirs(os.path.dirname(full_path), exist_ok=True)
    mode = 'wb' if isinstance(content, bytes) else 'w'
    kwargs = {} if isinstance(content, bytes) else {'newline': ''}
    with open(full_path, mode, **kwargs) as f:
        f.write(content)
    return full_path


def read_file(root, rel_path):
    with open(os.path.join(root, *rel_path.split('/')), 'r', newline='') as f:
        return f.read()


# Mock args object for command functions
class MockArgs:
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)
