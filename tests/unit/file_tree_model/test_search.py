"""Tests for recursive name search."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyexplorer.cancel import CancelToken
from lazyexplorer.file_tree_model import search


class SearchTests(unittest.TestCase):
    def test_finds_matches_at_any_depth(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            deep = root / "sub" / "deep"
            deep.mkdir(parents=True)
            (deep / "match.txt").write_text("x", encoding="utf-8")
            (root / "other.txt").write_text("x", encoding="utf-8")

            results = search(root, "match")

            self.assertEqual([entry.name for entry in results], ["match.txt"])
            self.assertEqual(results[0].path, Path(os.path.abspath(deep)) / "match.txt")

    def test_match_is_case_insensitive_and_includes_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "Reports").mkdir()
            (root / "Reports" / "q1-REPORT.pdf").write_text("x", encoding="utf-8")

            names = [entry.name for entry in search(root, "report")]

            self.assertEqual(names, ["Reports", "q1-REPORT.pdf"])

    def test_missing_root_yields_empty_result(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(search(Path(tmp) / "missing", "x"), [])

    def test_unreadable_subtree_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "locked").mkdir()
            (root / "open").mkdir()
            (root / "open" / "hit.txt").write_text("x", encoding="utf-8")

            from lazyexplorer.file_tree_model import fs

            real_scan = fs._scan_children
            locked = Path(os.path.abspath(root)) / "locked"

            def scan(directory: Path):
                if directory == locked:
                    raise PermissionError(13, "Permission denied", str(directory))
                return real_scan(directory)

            with mock.patch.object(fs, "_scan_children", side_effect=scan):
                names = [entry.name for entry in search(root, "hit")]

            self.assertEqual(names, ["hit.txt"])

    def test_cancelled_search_returns_partial_results(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("a-hit", "b-hit", "c-hit"):
                (root / name).write_text("x", encoding="utf-8")
            cancel = CancelToken()
            cancel.cancel()

            self.assertEqual(search(root, "hit", cancel=cancel), [])


if __name__ == "__main__":
    unittest.main()
