"""Recursive, case-insensitive name search over a directory tree."""

from __future__ import annotations

import logging
from pathlib import Path

from ..cancel import CancelToken
from ..errors import CancelledError
from .fs import walk_tree
from .types import FileEntry

logger = logging.getLogger(__name__)


def search(root: Path | str, query: str, cancel: CancelToken | None = None) -> list[FileEntry]:
    """Return every entry below ``root`` whose name contains ``query``.

    Matching ignores case and the walk is depth-unbounded. Unreadable subtrees
    are skipped rather than failing the search. When ``cancel`` fires, the
    matches collected so far are returned.
    """
    needle = query.lower()
    matches: list[FileEntry] = []
    try:
        for entry in walk_tree(root, cancel=cancel):
            if needle in entry.name.lower():
                matches.append(entry)
    except CancelledError:
        logger.debug("search for %r under %s cancelled after %d matches", query, root, len(matches))
    return matches


__all__ = ["search"]
