"""
Test directory snapshots.

Verifies that building trees from directories is deterministic,
prunes empty directories and matches git's object names.
"""

import os

import pytest

from treestore import StorageError, TreeStoreEngine
from treestore.model.tree import MODE_DIRECTORY, MODE_FILE
from treestore.tree_builder import TreeBuilder


def make_fixture(root, order=('a', 'b', 'sub')):
    """Create a small tree; creation order is controlled by ``order``."""
    root.mkdir(parents=True, exist_ok=True)
    for name in order:
        if name == 'sub':
            (root / 'sub' / 'deep').mkdir(parents=True)
            (root / 'sub' / 'deep' / 'n.txt').write_bytes(b'nested')
        else:
            (root / f'{name}.txt').write_bytes(name.encode())
    (root / 'empty').mkdir()
    return root


class TestTreeBuilder:
    """Test TreeStoreEngine.write_tree and the underlying builder."""

    @pytest.fixture
    def engine(self, tmp_path):
        engine = TreeStoreEngine(tmp_path / 'store')
        engine.initialize()
        return engine

    def test_single_file_example(self, engine, tmp_path):
        """One file 'a.txt' containing 'hello' gives git's tree hash."""
        work = tmp_path / 'work'
        work.mkdir()
        (work / 'a.txt').write_bytes(b'hello')

        tree_hash = engine.write_tree(work)

        assert tree_hash == '65829399355e5929e44741d637d52c614ac21bc3'
        assert engine.read_blob('b6fc4c620b67d95f953a5c1c1230aaab5db5a1b0') == b'hello'

    def test_nested_matches_git(self, engine, tmp_path):
        tree_hash = engine.write_tree(make_fixture(tmp_path / 'work'))

        assert tree_hash == '0f5f6e708923bd0dc767b650951e5f693019ab25'

    def test_entries_are_sorted_with_modes(self, engine, tmp_path):
        tree_hash = engine.write_tree(make_fixture(tmp_path / 'work'))
        entries = engine.read_tree(tree_hash)

        assert [e.name for e in entries] == ['a.txt', 'b.txt', 'sub']
        assert [e.mode for e in entries] == [MODE_FILE, MODE_FILE, MODE_DIRECTORY]

    def test_subtrees_are_stored(self, engine, tmp_path):
        tree_hash = engine.write_tree(make_fixture(tmp_path / 'work'))
        sub = [e for e in engine.read_tree(tree_hash) if e.name == 'sub'][0]
        deep = engine.read_tree(sub.hex)

        assert [e.name for e in deep] == ['deep']
        leaf = engine.read_tree(deep[0].hex)
        assert engine.read_blob(leaf[0].hex) == b'nested'

    def test_determinism(self, engine, tmp_path):
        work = make_fixture(tmp_path / 'work')

        assert engine.write_tree(work) == engine.write_tree(work)

    def test_creation_order_independence(self, engine, tmp_path):
        first = make_fixture(tmp_path / 'one', order=('a', 'b', 'sub'))
        second = make_fixture(tmp_path / 'two', order=('sub', 'b', 'a'))

        assert engine.write_tree(first) == engine.write_tree(second)

    def test_listing_order_independence(self, tmp_path, monkeypatch):
        """Children listed in reverse still serialize to the same tree."""
        work = make_fixture(tmp_path / 'work')
        engine = TreeStoreEngine(tmp_path / 'other-store')
        list_children = TreeBuilder._list_children
        monkeypatch.setattr(
            TreeBuilder, '_list_children',
            lambda self, path: list(reversed(list_children(self, path))),
        )

        assert engine.write_tree(work) == '0f5f6e708923bd0dc767b650951e5f693019ab25'

    def test_empty_directory_returns_none(self, engine, tmp_path):
        work = tmp_path / 'work'
        (work / 'x' / 'y').mkdir(parents=True)
        (work / 'z').mkdir()

        assert engine.write_tree(work) is None
        assert engine.list_all_objects() == []

    def test_store_directory_excluded(self, tmp_path):
        """The store root inside the work dir is not snapshotted."""
        work = tmp_path / 'work'
        work.mkdir()
        (work / 'a.txt').write_bytes(b'hello')
        engine = TreeStoreEngine(work / '.git')
        engine.initialize()

        tree_hash = engine.write_tree(work)

        assert tree_hash == '65829399355e5929e44741d637d52c614ac21bc3'
        assert engine.ls_tree(tree_hash, name_only=True) == ['a.txt']

    def test_custom_store_name_excluded(self, tmp_path):
        work = tmp_path / 'work'
        work.mkdir()
        (work / 'a.txt').write_bytes(b'hello')
        engine = TreeStoreEngine(work / 'objects-db')
        engine.initialize()
        engine.put_blob(b'something')

        assert engine.write_tree(work) == '65829399355e5929e44741d637d52c614ac21bc3'

    def test_nested_git_directory_excluded(self, engine, tmp_path):
        work = tmp_path / 'work'
        (work / 'lib' / '.git').mkdir(parents=True)
        (work / 'lib' / '.git' / 'HEAD').write_text('ref: refs/heads/main\n')
        (work / 'lib' / 'a.txt').write_bytes(b'hello')

        tree_hash = engine.write_tree(work)
        lib = engine.read_tree(tree_hash)[0]

        assert engine.ls_tree(lib.hex, name_only=True) == ['a.txt']

    def test_empty_file_is_stored(self, engine, tmp_path):
        work = tmp_path / 'work'
        work.mkdir()
        (work / 'empty.txt').write_bytes(b'')

        tree_hash = engine.write_tree(work)
        entry = engine.read_tree(tree_hash)[0]

        assert entry.hex == 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'
        assert engine.read_blob(entry.hex) == b''

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason='needs symlinks')
    def test_failure_aborts_build(self, engine, tmp_path):
        """A child that cannot be read aborts the build; no parent tree is written."""
        work = tmp_path / 'work'
        (work / 'ok').mkdir(parents=True)
        (work / 'ok' / 'a.txt').write_bytes(b'hello')
        os.symlink(work / 'missing-target', work / 'zz-dangling')

        with pytest.raises(StorageError):
            engine.write_tree(work)

        kinds = [engine.read_object(h)[0].value for h in engine.list_all_objects()]
        # the completed 'ok' subtree and its blob remain, the root does not
        assert sorted(kinds) == ['blob', 'tree']
        assert engine.has_object('b6fc4c620b67d95f953a5c1c1230aaab5db5a1b0')

    def test_hash_object_without_write(self, engine, tmp_path):
        path = tmp_path / 'a.txt'
        path.write_bytes(b'hello')

        obj_hash = engine.hash_object(path, write=False)

        assert obj_hash == 'b6fc4c620b67d95f953a5c1c1230aaab5db5a1b0'
        assert not engine.has_object(obj_hash)

    def test_hash_object_with_write(self, engine, tmp_path):
        path = tmp_path / 'a.txt'
        path.write_bytes(b'hello')

        obj_hash = engine.hash_object(path)

        assert engine.cat_file(obj_hash) == b'hello'

    def test_hash_object_missing_file(self, engine, tmp_path):
        with pytest.raises(StorageError):
            engine.hash_object(tmp_path / 'nope.txt')
