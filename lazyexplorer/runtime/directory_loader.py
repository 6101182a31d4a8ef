"""Background workers that keep directory I/O off the interactive thread.

Listing requests go through one persistent worker; each recursive search
runs on its own short-lived thread. Both deliver ``ListingResult`` values
through a result queue, tagged with the id returned when the request was
issued so callers can drop stale results.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..cancel import CancelToken
from ..errors import FsError, IoError
from ..file_tree_model import FileEntry, list_directory, search

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingRequest:
    """One directory-listing or search job."""

    request_id: int
    path: Path
    show_hidden: bool = True
    query: str | None = None


@dataclass(frozen=True)
class ListingResult:
    """Completed job: ``entries`` on success, otherwise ``error``."""

    request: ListingRequest
    entries: tuple[FileEntry, ...] = ()
    error: FsError | None = None

    @property
    def request_id(self) -> int:
        return self.request.request_id

    @property
    def ok(self) -> bool:
        return self.error is None


class _ResultChannel:
    """Result queue plus the id of the most recently issued request."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._latest_id = 0
        self.results: Queue[ListingResult] = Queue()

    def next_request_id(self) -> int:
        with self._lock:
            self._latest_id = next(self._ids)
            return self._latest_id

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._latest_id

    def drain_results(self) -> list[ListingResult]:
        """Drain all completed results in delivery order."""
        out: list[ListingResult] = []
        while True:
            try:
                out.append(self.results.get_nowait())
            except Empty:
                break
        return out

    def latest_results(self) -> list[ListingResult]:
        """Drain results, keeping only those for the latest issued request."""
        latest = self.latest_request_id
        return [result for result in self.drain_results() if result.request_id == latest]


class DirectoryLoader(_ResultChannel):
    """Single persistent worker serving directory listings in request order."""

    _STOP = None

    def __init__(self, list_entries: Callable[..., list[FileEntry]] = list_directory) -> None:
        super().__init__()
        self._list_entries = list_entries
        self._requests: Queue[ListingRequest | None] = Queue()
        self._worker = threading.Thread(
            target=self._run,
            name="lazyexplorer-directory-loader",
            daemon=True,
        )
        self._worker.start()

    def _run(self) -> None:
        while True:
            request = self._requests.get()
            if request is self._STOP:
                return
            try:
                entries = self._list_entries(request.path, show_hidden=request.show_hidden)
            except FsError as exc:
                result = ListingResult(request=request, error=exc)
            except Exception as exc:
                logger.exception("directory listing failed for %s", request.path)
                result = ListingResult(request=request, error=IoError(str(exc), request.path))
            else:
                result = ListingResult(request=request, entries=tuple(entries))
            self.results.put(result)

    def request(self, path: Path | str, show_hidden: bool = True) -> int:
        """Queue a listing of ``path`` and return its request id."""
        request_id = self.next_request_id()
        self._requests.put(ListingRequest(request_id=request_id, path=Path(path), show_hidden=show_hidden))
        return request_id

    def close(self, timeout: float | None = None) -> None:
        """Stop the worker after the already-queued requests finish."""
        self._requests.put(self._STOP)
        self._worker.join(timeout)

    def __enter__(self) -> "DirectoryLoader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SearchRunner(_ResultChannel):
    """Runs each recursive search on its own background thread."""

    def __init__(self, search_entries: Callable[..., list[FileEntry]] = search) -> None:
        super().__init__()
        self._search_entries = search_entries

    def _run(self, request: ListingRequest, cancel: CancelToken) -> None:
        try:
            entries = self._search_entries(request.path, request.query or "", cancel=cancel)
        except Exception as exc:
            logger.exception("search failed under %s", request.path)
            error = exc if isinstance(exc, FsError) else IoError(str(exc), request.path)
            self.results.put(ListingResult(request=request, error=error))
            return
        self.results.put(ListingResult(request=request, entries=tuple(entries)))

    def start(self, root: Path | str, query: str) -> tuple[int, CancelToken]:
        """Spawn a search for ``query`` under ``root``; return its id and cancel token."""
        request = ListingRequest(request_id=self.next_request_id(), path=Path(root), query=query)
        cancel = CancelToken()
        worker = threading.Thread(
            target=self._run,
            args=(request, cancel),
            name=f"lazyexplorer-search-{request.request_id}",
            daemon=True,
        )
        worker.start()
        return request.request_id, cancel


__all__ = [
    "ListingRequest",
    "ListingResult",
    "DirectoryLoader",
    "SearchRunner",
]
