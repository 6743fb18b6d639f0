"""Catalog of image records and its filtered view.

Both lists are held as immutable snapshots. Every mutation re-derives the
filtered view from `full` and the active query, then notifies listeners so
dependent state (gallery expansion) can reset.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

from core.models import ImageRecord
from core.services.search_service import SearchFilter

CatalogListener = Callable[[tuple[ImageRecord, ...]], None]


class Catalog:
    """Authoritative full list of records plus the current filtered view."""

    def __init__(self, search: SearchFilter | None = None) -> None:
        self._search = search or SearchFilter()
        self._full: tuple[ImageRecord, ...] = ()
        self._filtered: tuple[ImageRecord, ...] = ()
        self._query = ""
        self._listeners: list[CatalogListener] = []

    def add_listener(self, listener: CatalogListener) -> None:
        """Call `listener(view)` after every load or query change."""
        self._listeners.append(listener)

    def load(self, records: Iterable[ImageRecord]) -> None:
        """Replace the full list and re-apply the active query."""
        self._full = tuple(records)
        logger.info("Catalog loaded: {} records", len(self._full))
        self._rederive()

    def set_query(self, text: str) -> None:
        """Filter the full list by `text`; `full` is left untouched."""
        self._query = text or ""
        self._rederive()

    def clear_query(self) -> None:
        self.set_query("")

    def view(self) -> tuple[ImageRecord, ...]:
        """Records matching the active query, in catalog order."""
        return self._filtered

    @property
    def full(self) -> tuple[ImageRecord, ...]:
        return self._full

    @property
    def query(self) -> str:
        return self._query

    def record_at(self, index: int) -> ImageRecord:
        """Return the record at `index` of the filtered view."""
        if not 0 <= index < len(self._filtered):
            raise IndexError(f"row {index} outside filtered view of {len(self._filtered)}")
        return self._filtered[index]

    def __len__(self) -> int:
        return len(self._filtered)

    def _rederive(self) -> None:
        self._filtered = self._search.apply(self._full, self._query)
        logger.debug(
            "Catalog view: {} of {} records for query {!r}",
            len(self._filtered),
            len(self._full),
            self._query,
        )
        for listener in list(self._listeners):
            listener(self._filtered)
