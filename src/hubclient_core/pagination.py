"""Cursor-based pagination for hub list endpoints.

List endpoints answer with ``{count, next, previous, results}``. ``next`` is
an absolute URL to the following page, or null on the last one. The
``Paginator`` follows those cursors under a page budget; it does not buffer
results itself, the per-page callback decides what to keep.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from hubclient_core.errors.exceptions import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProcessPage = Callable[[str], str | None]


@dataclass
class Page(Generic[T]):
    """One page of a list endpoint."""

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[T] = field(default_factory=list)

    @classmethod
    def parser(cls, item: Callable[[Any], T]) -> Callable[[Any], "Page[T]"]:
        """Return a function that parses a raw page, converting each result with ``item``."""

        def parse(data: Any) -> "Page[T]":
            if not isinstance(data, Mapping):
                raise TypeError(f"expected a JSON object for a page, got {type(data).__name__}")
            return cls(
                count=data.get("count") or 0,
                next=data.get("next") or None,
                previous=data.get("previous") or None,
                results=[item(raw) for raw in data.get("results") or []],
            )

        return parse


class Paginator:
    """Follow ``next`` cursors until they run out or the budget is spent.

    Args:
        max_pages: Maximum number of pages to fetch; 0 means unlimited.
    """

    def __init__(self, max_pages: int = 0):
        if max_pages < 0:
            raise ValueError(f"max_pages must be >= 0, got {max_pages}")
        self.max_pages = max_pages

    def run(
        self,
        initial_url: str,
        process_page: ProcessPage,
        cancel: threading.Event | None = None,
    ) -> int:
        """Call ``process_page`` for each page, starting at ``initial_url``.

        ``process_page`` fetches and handles one page and returns its
        ``next`` cursor (None or "" on the last page). Reaching the budget
        stops the walk without an error. Exceptions from ``process_page``
        abort the walk and propagate unchanged.

        Returns:
            Number of pages fetched.

        Raises:
            RequestCancelledError: If ``cancel`` is set between pages.
        """
        cursor: str | None = initial_url
        pages_fetched = 0

        while cursor:
            if cancel is not None and cancel.is_set():
                raise RequestCancelledError(f"pagination of {initial_url} cancelled")

            next_cursor = process_page(cursor)
            pages_fetched += 1

            if self.max_pages > 0 and pages_fetched >= self.max_pages:
                if next_cursor:
                    logger.debug(
                        f"Stopping pagination of {initial_url} after {pages_fetched} pages (page budget reached)"
                    )
                break

            cursor = next_cursor

        return pages_fetched
