# Unit tests for vcs/graph.py

import pytest
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'minivcs-project'))

from vcs.commit import Commit
from vcs.graph import CommitGraph
from vcs.errors import (BranchExists, CorruptHistory, DuplicateCommit, InvalidBranchName,
                        IOFailure, UnknownBranch, UnknownCommit)


def make_chain(graph, count, start=1700000000):
    commits = []
    parent = None
    for n in range(count):
        commit = Commit(f"commit {n}", start + n, parent, {f"file{n}.txt": str(n) * 40})
        graph.add_commit(commit)
        commits.append(commit)
        parent = commit.id
    return commits


class TestAddCommit:

    def test_advances_branch_and_head(self):
        graph = CommitGraph()
        commit = Commit('first', 1, None, {'a': 'h'})

        graph.add_commit(commit)

        assert graph.head == commit.id
        assert graph.refs['master'] == commit.id

    def test_same_commit_twice_is_idempotent(self):
        graph = CommitGraph()
        commit = Commit('first', 1, None, {'a': 'h'})
        graph.add_commit(commit)
        graph.add_commit(Commit('first', 1, None, {'a': 'h'}))

        assert len(graph.commits) == 1

    def test_same_id_different_fields(self):
        graph = CommitGraph()
        graph.add_commit(Commit('first', 1, None, {'a': 'h'}))
        forged = Commit('other', 2, None, {}, commit_id=graph.head)

        with pytest.raises(DuplicateCommit):
            graph.add_commit(forged)

    def test_clears_detached_head(self):
        graph = CommitGraph()
        first, second = make_chain(graph, 2)
        graph.checkout_commit(first.id)

        third = Commit('third', 5, first.id, {})
        graph.add_commit(third)

        assert not graph.is_detached
        assert graph.head == third.id
        assert graph.refs['master'] == third.id


class TestGetCommit:

    def test_unknown(self):
        with pytest.raises(UnknownCommit):
            CommitGraph().get_commit('f' * 40)


class TestHistoryFromHead:

    def test_empty_before_first_commit(self):
        assert CommitGraph().history_from_head() == []

    def test_oldest_first(self):
        graph = CommitGraph()
        commits = make_chain(graph, 4)

        assert graph.history_from_head() == commits

    def test_follows_detached_head(self):
        graph = CommitGraph()
        commits = make_chain(graph, 4)
        graph.checkout_commit(commits[1].id)

        assert graph.history_from_head() == commits[:2]

    def test_missing_parent_is_corrupt(self):
        graph = CommitGraph()
        graph.add_commit(Commit('orphan', 1, 'e' * 40, {}))

        with pytest.raises(CorruptHistory):
            graph.history_from_head()


class TestBranches:

    def test_create_points_at_head(self):
        graph = CommitGraph()
        commits = make_chain(graph, 2)
        graph.create_branch('feature')

        assert graph.branch_head('feature') == commits[-1].id
        assert graph.branches() == ['feature', 'master']

    def test_create_before_first_commit(self):
        graph = CommitGraph()
        graph.create_branch('feature')
        assert graph.branch_head('feature') is None

    def test_create_existing(self):
        graph = CommitGraph()
        with pytest.raises(BranchExists):
            graph.create_branch('master')

    @pytest.mark.parametrize('name', ['', 'a/b', '../x', '.hidden', 'has space', 'x.lock'])
    def test_invalid_names(self, name):
        with pytest.raises(InvalidBranchName):
            CommitGraph().create_branch(name)

    def test_switch_restores_branch_head(self):
        graph = CommitGraph()
        first = make_chain(graph, 1)[0]
        graph.create_branch('feature')
        graph.switch_branch('feature')
        second = Commit('on feature', 10, first.id, {'f': 'h'})
        graph.add_commit(second)

        graph.switch_branch('master')

        assert graph.current_branch == 'master'
        assert graph.head == first.id
        assert graph.branch_head('feature') == second.id

    def test_switch_unknown(self):
        with pytest.raises(UnknownBranch):
            CommitGraph().switch_branch('nope')

    def test_branch_annotations(self):
        graph = CommitGraph()
        first = make_chain(graph, 1)[0]
        graph.create_branch('feature')
        assert graph.branch_annotations(first.id) == ['feature', 'master']


class TestCheckoutCommit:

    def test_detaches_without_changing_branch(self):
        graph = CommitGraph()
        commits = make_chain(graph, 3)

        graph.checkout_commit(commits[0].id)

        assert graph.is_detached
        assert graph.head == commits[0].id
        assert graph.current_branch == 'master'
        assert graph.refs['master'] == commits[-1].id

    def test_unknown(self):
        graph = CommitGraph()
        make_chain(graph, 1)
        with pytest.raises(UnknownCommit):
            graph.checkout_commit('0' * 40)
        assert not graph.is_detached


class TestMergeBranch:

    def test_adopts_other_head_when_current_is_empty(self):
        graph = CommitGraph()
        graph.create_branch('feature')
        graph.switch_branch('feature')
        commit = make_chain(graph, 1)[0]
        graph.switch_branch('master')

        result = graph.merge_branch('feature', 99)

        assert result == commit
        assert graph.head == commit.id
        assert len(graph.commits) == 1

    def test_synthesizes_union_commit(self):
        graph = CommitGraph()
        base = Commit('base', 1, None, {'shared.txt': 'base', 'keep.txt': 'k'})
        graph.add_commit(base)
        graph.create_branch('feature')
        graph.switch_branch('feature')
        theirs = Commit('theirs', 2, base.id, {'shared.txt': 'theirs', 'keep.txt': 'k', 'new.txt': 'n'})
        graph.add_commit(theirs)
        graph.switch_branch('master')
        ours = Commit('ours', 3, base.id, {'shared.txt': 'ours', 'keep.txt': 'k', 'mine.txt': 'm'})
        graph.add_commit(ours)

        merged = graph.merge_branch('feature', 4)

        assert merged.parent == ours.id
        assert merged.message == "Merge branch 'feature' into master"
        assert dict(merged.files) == {
            'shared.txt': 'theirs', 'keep.txt': 'k', 'new.txt': 'n', 'mine.txt': 'm',
        }
        assert graph.head == merged.id
        assert graph.branch_head('feature') == theirs.id

    def test_already_merged_branch_is_a_noop(self):
        graph = CommitGraph()
        first, second = make_chain(graph, 2)
        graph.refs['stale'] = first.id

        result = graph.merge_branch('stale', 99)

        assert result == second
        assert graph.head == second.id
        assert len(graph.commits) == 2

    def test_same_commit_is_a_noop(self):
        graph = CommitGraph()
        first = make_chain(graph, 1)[0]
        graph.create_branch('feature')

        assert graph.merge_branch('feature', 99) == first
        assert len(graph.commits) == 1

    def test_fast_forward_when_behind(self):
        graph = CommitGraph()
        first = make_chain(graph, 1)[0]
        graph.create_branch('feature')
        graph.switch_branch('feature')
        ahead = Commit('ahead', 10, first.id, {'f': 'h'})
        graph.add_commit(ahead)
        graph.switch_branch('master')

        result = graph.merge_branch('feature', 99)

        assert result == ahead
        assert graph.refs['master'] == ahead.id
        assert len(graph.commits) == 2

    def test_other_branch_without_commits(self):
        graph = CommitGraph()
        make_chain(graph, 1)
        graph.refs['empty'] = None
        head = graph.head

        assert graph.merge_branch('empty', 5) is None
        assert graph.head == head

    def test_unknown_branch(self):
        with pytest.raises(UnknownBranch):
            CommitGraph().merge_branch('nope', 1)


class TestIsAncestor:

    def test_parent_chain(self):
        graph = CommitGraph()
        first, second, third = make_chain(graph, 3)

        assert graph.is_ancestor(first.id, third.id)
        assert graph.is_ancestor(third.id, third.id)
        assert not graph.is_ancestor(third.id, first.id)

    def test_missing_parent_is_corrupt(self):
        graph = CommitGraph()
        graph.add_commit(Commit('orphan', 1, 'e' * 40, {}))

        with pytest.raises(CorruptHistory):
            graph.is_ancestor('f' * 40, graph.head)


class TestResolve:

    def test_full_id(self):
        graph = CommitGraph()
        commit = make_chain(graph, 1)[0]
        assert graph.resolve(commit.id) == commit.id

    def test_unique_prefix(self):
        graph = CommitGraph()
        commit = make_chain(graph, 1)[0]
        assert graph.resolve(commit.id[:7]) == commit.id
        assert graph.resolve(commit.id[:7].upper()) == commit.id

    def test_prefix_too_short(self):
        graph = CommitGraph()
        commit = make_chain(graph, 1)[0]
        with pytest.raises(UnknownCommit):
            graph.resolve(commit.id[:3])

    def test_ambiguous_prefix(self):
        graph = CommitGraph()
        first = Commit('a', 1, None, {}, commit_id='abcd' + '0' * 36)
        second = Commit('b', 2, None, {}, commit_id='abcd' + '1' * 36)
        graph.commits = {first.id: first, second.id: second}

        with pytest.raises(UnknownCommit, match='ambiguous'):
            graph.resolve('abcd')

    def test_unknown(self):
        with pytest.raises(UnknownCommit):
            CommitGraph().resolve('deadbeef')


class TestPersistence:

    def test_save_and_load(self, temp_repo):
        graph = CommitGraph.load(temp_repo)
        commits = make_chain(graph, 3)
        graph.create_branch('feature')
        graph.checkout_commit(commits[0].id)
        graph.save(temp_repo)

        loaded = CommitGraph.load(temp_repo)

        assert loaded.history_from_head() == commits[:1]
        assert loaded.refs == {'master': commits[-1].id, 'feature': commits[-1].id}
        assert loaded.current_branch == 'master'
        assert loaded.detached_head == commits[0].id

    def test_layout_on_disk(self, temp_repo):
        graph = CommitGraph.load(temp_repo)
        commit = make_chain(graph, 1)[0]
        graph.save(temp_repo)

        vcs_dir = os.path.join(temp_repo, '.mini-vcs')
        assert os.path.isfile(os.path.join(vcs_dir, 'commits', commit.id))
        with open(os.path.join(vcs_dir, 'refs', 'heads', 'master')) as f:
            assert f.read() == f"{commit.id}\n"
        with open(os.path.join(vcs_dir, 'HEAD')) as f:
            assert f.read() == 'ref: refs/heads/master\n'

    def test_fresh_repository(self, temp_repo):
        graph = CommitGraph.load(temp_repo)
        assert graph.head is None
        assert graph.refs == {'master': None}

    def test_unreadable_directory(self, temp_repo, monkeypatch):
        def failing_listdir(path):
            raise PermissionError(13, 'Permission denied', path)
        monkeypatch.setattr(os, 'listdir', failing_listdir)

        with pytest.raises(IOFailure):
            CommitGraph.load(temp_repo)

    def test_skips_interrupted_writes(self, temp_repo):
        with open(os.path.join(temp_repo, '.mini-vcs', 'commits', '.tmp-abc'), 'wb') as f:
            f.write(b'partial')

        assert CommitGraph.load(temp_repo).commits == {}

    def test_ref_to_missing_commit(self, temp_repo):
        with open(os.path.join(temp_repo, '.mini-vcs', 'refs', 'heads', 'master'), 'w') as f:
            f.write('f' * 40 + '\n')

        with pytest.raises(CorruptHistory):
            CommitGraph.load(temp_repo)

    def test_tampered_commit_fails_integrity_check(self, temp_repo):
        graph = CommitGraph.load(temp_repo)
        commit = make_chain(graph, 1)[0]
        graph.save(temp_repo)

        forged = Commit('forged', commit.timestamp, None, dict(commit.files), commit_id=commit.id)
        with open(os.path.join(temp_repo, '.mini-vcs', 'commits', commit.id), 'wb') as f:
            f.write(forged.serialize())

        with pytest.raises(CorruptHistory):
            CommitGraph.load(temp_repo)

    def test_damaged_commit_file(self, temp_repo):
        graph = CommitGraph.load(temp_repo)
        commit = make_chain(graph, 1)[0]
        graph.save(temp_repo)

        with open(os.path.join(temp_repo, '.mini-vcs', 'commits', commit.id), 'wb') as f:
            f.write(b'\x00\x01')

        with pytest.raises(CorruptHistory):
            CommitGraph.load(temp_repo)
