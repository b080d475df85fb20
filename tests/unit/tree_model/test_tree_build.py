"""Tests for building the arena tree from walk streams."""

from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path

from itree.errors import TreeBuildError
from itree.file_tree_model import (
    KIND_DIRECTORY,
    KIND_FILE,
    KIND_RESTRICTED_DIRECTORY,
    KIND_STDIN,
    KIND_SYMLINK,
    WalkEntry,
    WalkError,
)
from itree.tree_model import build_tree, display_name, format_summary
from itree.tree_model.build import LINK_TARGET_UNREADABLE, NAME_NON_UTF8, NAME_UNKNOWN, entry_for_walk_entry

ROOT = Path("root")


def _entry(rel: str, depth: int, is_dir: bool = False) -> WalkEntry:
    return WalkEntry(ROOT / rel, depth, is_dir)


def _root() -> WalkEntry:
    return WalkEntry(ROOT, 0, True)


def _names(built, node) -> list[str]:
    return [built.arena[child].entry.name for child in built.arena.children(node)]


def _child(built, node, name):
    for child in built.arena.children(node):
        if built.arena[child].entry.name == name:
            return child
    raise AssertionError(f"no child named {name!r}")


class BuildTreeStructureTests(unittest.TestCase):
    def test_flat_directory_attaches_files_to_root(self) -> None:
        built = build_tree([_root(), _entry("myfile", 1), _entry("myotherfile", 1)])

        self.assertEqual(_names(built, built.root), ["myfile", "myotherfile"])
        self.assertEqual(built.summary(), "0 directories, 2 files")

    def test_nested_entries_follow_depth_changes(self) -> None:
        built = build_tree(
            [
                _root(),
                _entry("mydir", 1, is_dir=True),
                _entry("mydir/myfile", 2),
                _entry("myotherfile", 1),
            ]
        )

        mydir = _child(built, built.root, "mydir")
        self.assertEqual(_names(built, built.root), ["mydir", "myotherfile"])
        self.assertEqual(_names(built, mydir), ["myfile"])
        self.assertEqual(built.summary(), "1 directory, 2 files")

    def test_depth_drop_of_several_levels_returns_to_the_right_ancestor(self) -> None:
        built = build_tree(
            [
                _root(),
                _entry("a", 1, is_dir=True),
                _entry("a/b", 2, is_dir=True),
                _entry("a/b/c", 3, is_dir=True),
                _entry("a/b/c/deep", 4),
                _entry("a/sibling", 2),
                _entry("z", 1),
            ]
        )

        a = _child(built, built.root, "a")
        b = _child(built, a, "b")
        c = _child(built, b, "c")
        self.assertEqual(_names(built, built.root), ["a", "z"])
        self.assertEqual(_names(built, a), ["b", "sibling"])
        self.assertEqual(_names(built, c), ["deep"])
        self.assertEqual(built.n_dirs, 3)
        self.assertEqual(built.n_files, 2)

    def test_every_node_depth_matches_its_walk_depth(self) -> None:
        stream = [
            _root(),
            _entry("a", 1, is_dir=True),
            _entry("a/b", 2, is_dir=True),
            _entry("a/b/f", 3),
            _entry("g", 1),
        ]
        built = build_tree(stream)

        for node_id in range(len(built.arena)):
            entry = built.arena[node_id].entry
            self.assertEqual(built.arena.depth(node_id), entry.depth)

    def test_root_only_stream_builds_single_node(self) -> None:
        built = build_tree([_root()])

        self.assertEqual(len(built.arena), 1)
        self.assertIsNone(built.arena[built.root].first_child)
        self.assertEqual(built.summary(), "0 directories, 0 files")

    def test_root_name_is_the_path_as_given(self) -> None:
        built = build_tree([WalkEntry(Path("resources/test/"), 0, True)])

        self.assertEqual(built.arena[built.root].entry.name, "resources/test")

    def test_building_twice_from_the_same_stream_gives_the_same_shape(self) -> None:
        stream = [
            _root(),
            _entry("a", 1, is_dir=True),
            _entry("a/f", 2),
            _entry("b", 1),
        ]
        first = build_tree(stream)
        second = build_tree(stream)

        self.assertEqual(
            [node.entry.name for node in first.arena.nodes],
            [node.entry.name for node in second.arena.nodes],
        )
        self.assertEqual(first.summary(), second.summary())


class BuildTreeKindTests(unittest.TestCase):
    def test_kinds_come_from_walk_flags(self) -> None:
        built = build_tree([_root(), _entry("d", 1, is_dir=True), _entry("f", 1)])

        self.assertEqual(built.arena[_child(built, built.root, "d")].entry.kind, KIND_DIRECTORY)
        self.assertEqual(built.arena[_child(built, built.root, "f")].entry.kind, KIND_FILE)

    def test_stdin_root_is_not_counted(self) -> None:
        built = build_tree([WalkEntry(Path("-"), 0, False, is_stdin=True)])

        self.assertEqual(built.arena[built.root].entry.kind, KIND_STDIN)
        self.assertEqual(built.summary(), "0 directories, 0 files")

    def test_symlink_records_link_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "source").write_text("x\n", encoding="utf-8")
            os.symlink("source", root / "dest")

            entry = entry_for_walk_entry(WalkEntry(root / "dest", 1, False, is_symlink=True))

        self.assertEqual(entry.kind, KIND_SYMLINK)
        self.assertEqual(entry.link_target, "source")

    def test_unreadable_link_target_uses_placeholder(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            entry = entry_for_walk_entry(WalkEntry(Path(tmp) / "gone", 1, False, is_symlink=True))

        self.assertEqual(entry.link_target, LINK_TARGET_UNREADABLE)

    def test_display_name_placeholders(self) -> None:
        self.assertEqual(display_name(Path("a/b/name.txt")), "name.txt")
        self.assertEqual(display_name(Path("/")), NAME_UNKNOWN)
        self.assertEqual(display_name("bad\udcffname"), NAME_NON_UTF8)

    def test_format_summary_pluralization(self) -> None:
        self.assertEqual(format_summary(0, 0), "0 directories, 0 files")
        self.assertEqual(format_summary(1, 1), "1 directory, 1 file")
        self.assertEqual(format_summary(4, 6), "4 directories, 6 files")


class BuildTreeErrorTests(unittest.TestCase):
    def test_empty_stream_is_fatal(self) -> None:
        with self.assertRaises(TreeBuildError):
            build_tree([])

    def test_error_before_root_is_fatal(self) -> None:
        error = WalkError(FileNotFoundError(errno.ENOENT, "No such file or directory"), ROOT, 0)

        with self.assertRaises(TreeBuildError) as ctx:
            build_tree([error])

        self.assertIn("No such file or directory", str(ctx.exception))

    def test_nonzero_root_depth_is_fatal(self) -> None:
        with self.assertRaises(TreeBuildError):
            build_tree([_entry("x", 1)])

    def test_unlistable_root_is_fatal(self) -> None:
        error = WalkError(PermissionError(errno.EACCES, "Permission denied"), ROOT, 0)

        with self.assertRaises(TreeBuildError):
            build_tree([_root(), error])

    def test_second_root_level_entry_is_fatal(self) -> None:
        with self.assertRaises(TreeBuildError):
            build_tree([_root(), _entry("a", 1), WalkEntry(Path("other"), 0, True)])

    def test_permission_denied_directory_becomes_restricted(self) -> None:
        denied = WalkError(PermissionError(errno.EACCES, "Permission denied"), ROOT / "locked", 1)
        built = build_tree(
            [
                _root(),
                _entry("a", 1),
                _entry("locked", 1, is_dir=True),
                denied,
                _entry("z", 1),
            ]
        )

        locked = _child(built, built.root, "locked")
        self.assertEqual(_names(built, built.root), ["a", "locked", "z"])
        self.assertEqual(built.arena[locked].entry.kind, KIND_RESTRICTED_DIRECTORY)
        self.assertIsNone(built.arena[locked].first_child)
        self.assertEqual(built.summary(), "1 directory, 2 files")

    def test_restricted_directory_as_last_entry(self) -> None:
        denied = WalkError(PermissionError(errno.EACCES, "Permission denied"), ROOT / "sub/locked", 2)
        built = build_tree(
            [
                _root(),
                _entry("sub", 1, is_dir=True),
                _entry("sub/locked", 2, is_dir=True),
                denied,
            ]
        )

        sub = _child(built, built.root, "sub")
        locked = _child(built, sub, "locked")
        self.assertEqual(built.arena[locked].entry.kind, KIND_RESTRICTED_DIRECTORY)

    def test_other_errors_are_logged_and_skipped(self) -> None:
        broken = WalkError(OSError(errno.EIO, "Input/output error"), ROOT / "a", 1)

        with self.assertLogs("itree.tree_model.build", level="WARNING") as logs:
            built = build_tree([_root(), _entry("a", 1, is_dir=True), broken, _entry("b", 1)])

        a = _child(built, built.root, "a")
        self.assertEqual(built.arena[a].entry.kind, KIND_DIRECTORY)
        self.assertEqual(_names(built, built.root), ["a", "b"])
        self.assertIn("Input/output error", logs.output[0])

    def test_permission_error_for_another_path_does_not_restrict(self) -> None:
        denied = WalkError(PermissionError(errno.EACCES, "Permission denied"), ROOT / "elsewhere", 1)

        with self.assertLogs("itree.tree_model.build", level="WARNING"):
            built = build_tree([_root(), _entry("a", 1, is_dir=True), denied])

        a = _child(built, built.root, "a")
        self.assertEqual(built.arena[a].entry.kind, KIND_DIRECTORY)


if __name__ == "__main__":
    unittest.main()
