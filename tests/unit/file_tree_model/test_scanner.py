"""Tests for directory listing, ordering, and tree walks."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from lazyexplorer.errors import IoError, NotFoundError
from lazyexplorer.file_tree_model import (
    KIND_DIRECTORY,
    KIND_FILE,
    KIND_SYMLINK,
    SORT_BY_MODIFIED,
    SORT_BY_SIZE,
    FileEntry,
    list_directory,
    scan_entry,
    sort_entries,
    walk_tree,
)


def _names(entries: list[FileEntry]) -> list[str]:
    return [entry.name for entry in entries]


class ListDirectoryTests(unittest.TestCase):
    def test_directories_come_first_then_case_insensitive_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "B").mkdir()
            (root / "a").mkdir()
            (root / "c.txt").write_text("c", encoding="utf-8")
            (root / "A.txt").write_text("A", encoding="utf-8")

            entries = list_directory(root)

            self.assertEqual(_names(entries), ["a", "B", "A.txt", "c.txt"])

    def test_entries_carry_snapshot_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "docs").mkdir()
            (root / "notes.txt").write_bytes(b"12345")

            docs, notes = list_directory(root)

            self.assertEqual(docs.kind, KIND_DIRECTORY)
            self.assertEqual(docs.size, 0)
            self.assertTrue(docs.is_dir)
            self.assertEqual(notes.kind, KIND_FILE)
            self.assertEqual(notes.size, 5)
            self.assertTrue(notes.path.is_absolute())
            self.assertEqual(notes.path, Path(os.path.abspath(root)) / "notes.txt")
            self.assertEqual(notes.modified, int((root / "notes.txt").stat().st_mtime))

    def test_entries_are_immutable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "x").write_text("x", encoding="utf-8")
            entry = list_directory(tmp)[0]
            with self.assertRaises(Exception):
                entry.name = "y"  # type: ignore[misc]

    @unittest.skipIf(os.name == "nt", "dotfile hidden flag is POSIX-only")
    def test_show_hidden_false_drops_dotfiles(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".secret").write_text("s", encoding="utf-8")
            (root / "visible").write_text("v", encoding="utf-8")

            self.assertEqual(_names(list_directory(root)), [".secret", "visible"])
            self.assertEqual(_names(list_directory(root, show_hidden=False)), ["visible"])
            self.assertTrue(list_directory(root)[0].hidden)

    def test_missing_directory_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(NotFoundError) as ctx:
                list_directory(Path(tmp) / "missing")
            self.assertEqual(ctx.exception.kind, "not_found")

    def test_listing_a_file_raises_io_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "plain.txt"
            target.write_text("x", encoding="utf-8")
            with self.assertRaises(IoError):
                list_directory(target)

    @unittest.skipIf(os.name == "nt", "symlinks need privileges on Windows")
    def test_symlinks_are_reported_as_symlinks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "real").mkdir()
            os.symlink(root / "real", root / "link")

            kinds = {entry.name: entry.kind for entry in list_directory(root)}

            self.assertEqual(kinds, {"real": KIND_DIRECTORY, "link": KIND_SYMLINK})
            self.assertEqual(scan_entry(root / "link").kind, KIND_SYMLINK)


class SortEntriesTests(unittest.TestCase):
    def _entry(self, name: str, kind: str, size: int = 0, modified: int = 0) -> FileEntry:
        return FileEntry(name=name, path=Path("/x") / name, kind=kind, size=size, modified=modified)

    def test_size_order_keeps_directories_first_in_both_directions(self) -> None:
        entries = [
            self._entry("big.bin", KIND_FILE, size=900),
            self._entry("zdir", KIND_DIRECTORY),
            self._entry("small.bin", KIND_FILE, size=10),
            self._entry("adir", KIND_DIRECTORY),
        ]

        ascending = sort_entries(entries, SORT_BY_SIZE)
        descending = sort_entries(entries, SORT_BY_SIZE, descending=True)

        self.assertEqual(_names(ascending), ["adir", "zdir", "small.bin", "big.bin"])
        self.assertEqual(_names(descending), ["zdir", "adir", "big.bin", "small.bin"])

    def test_modified_order(self) -> None:
        entries = [
            self._entry("new.txt", KIND_FILE, modified=300),
            self._entry("old.txt", KIND_FILE, modified=100),
            self._entry("dir", KIND_DIRECTORY, modified=500),
        ]
        self.assertEqual(_names(sort_entries(entries, SORT_BY_MODIFIED)), ["dir", "old.txt", "new.txt"])

    def test_unknown_column_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            sort_entries([], "color")


class WalkTreeTests(unittest.TestCase):
    def test_walk_is_preorder_and_excludes_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub" / "deep").mkdir(parents=True)
            (root / "sub" / "deep" / "leaf.txt").write_text("x", encoding="utf-8")
            (root / "top.txt").write_text("x", encoding="utf-8")

            walked = [entry.path.relative_to(os.path.abspath(root)).as_posix() for entry in walk_tree(root)]

            self.assertEqual(walked, ["sub", "sub/deep", "sub/deep/leaf.txt", "top.txt"])

    @unittest.skipIf(os.name == "nt", "symlinks need privileges on Windows")
    def test_walk_does_not_follow_symlinked_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "loop").mkdir()
            os.symlink(root, root / "loop" / "back")

            walked = [entry.name for entry in walk_tree(root)]

            self.assertEqual(walked, ["loop", "back"])


if __name__ == "__main__":
    unittest.main()
