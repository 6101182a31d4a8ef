"""Runtime services for an interactive caller.

Groups the background directory loader/search runner and the persisted
settings value consumed by the presentation layer.
"""

from __future__ import annotations

from .directory_loader import DirectoryLoader, ListingRequest, ListingResult, SearchRunner

__all__ = [
    "DirectoryLoader",
    "ListingRequest",
    "ListingResult",
    "SearchRunner",
]
