"""Gallery expansion state machine and row geometry.

Geometry is never accumulated: every query recomputes row offsets and the
content extent from `(row_count, state, metrics)` via `compute_geometry`.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from core.models import (
    COLLAPSED,
    Collapsed,
    DetailGeometry,
    Expanded,
    ExpansionState,
    GalleryGeometry,
    LayoutMetrics,
    RowGeometry,
)


def content_height(row_count: int, state: ExpansionState, metrics: LayoutMetrics) -> float:
    """Closed-form extent: `top_inset + n*(H+M) + (D if expanded)`."""
    extent = metrics.top_inset + row_count * metrics.row_pitch
    if isinstance(state, Expanded):
        extent += metrics.detail_height
    return extent


def row_offset(index: int, state: ExpansionState, metrics: LayoutMetrics) -> float:
    """Top of row `index`; rows after the expanded one sit `D` lower."""
    y = metrics.top_inset + index * metrics.row_pitch
    if isinstance(state, Expanded) and index > state.index:
        y += metrics.detail_height
    return y


def compute_geometry(
    row_count: int, state: ExpansionState, metrics: LayoutMetrics
) -> GalleryGeometry:
    """Lay out `row_count` rows for the given expansion `state`."""
    if isinstance(state, Expanded) and not 0 <= state.index < row_count:
        raise ValueError(f"expanded row {state.index} outside {row_count} rows")

    rows = tuple(
        RowGeometry(index=i, y=row_offset(i, state, metrics), height=metrics.row_height)
        for i in range(row_count)
    )
    detail: DetailGeometry | None = None
    if isinstance(state, Expanded):
        detail = DetailGeometry(
            index=state.index,
            y=rows[state.index].y + metrics.row_height,
            height=metrics.detail_height,
        )
    return GalleryGeometry(
        rows=rows, detail=detail, content_height=content_height(row_count, state, metrics)
    )


class GalleryLayout:
    """Tracks which single row (if any) is expanded in the filtered view.

    States are `Collapsed` and `Expanded(index)`. Tapping the expanded row
    collapses it; tapping another row collapses the current one and then
    expands the new one. Any change to the row set forces `Collapsed`.
    """

    def __init__(self, metrics: LayoutMetrics | None = None, row_count: int = 0) -> None:
        self._metrics = metrics or LayoutMetrics()
        self._row_count = max(0, int(row_count))
        self._state: ExpansionState = COLLAPSED

    @property
    def state(self) -> ExpansionState:
        return self._state

    @property
    def metrics(self) -> LayoutMetrics:
        return self._metrics

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def expanded_index(self) -> int | None:
        """Index of the expanded row, or None when collapsed."""
        if isinstance(self._state, Expanded):
            return self._state.index
        return None

    def tap(self, index: int) -> ExpansionState:
        """Apply a tap on row `index` and return the new state."""
        self._check_index(index)
        current = self._state
        if isinstance(current, Expanded) and current.index == index:
            self.collapse()
        elif isinstance(current, Expanded):
            self.collapse()
            self.expand(index)
        else:
            self.expand(index)
        return self._state

    def expand(self, index: int) -> None:
        """Expand row `index`; only valid while collapsed."""
        self._check_index(index)
        if not isinstance(self._state, Collapsed):
            raise RuntimeError(f"cannot expand row {index} while {self._state} is live")
        self._state = Expanded(index)
        logger.debug("Gallery row {} expanded", index)

    def collapse(self) -> None:
        """Return to `Collapsed`; no-op when nothing is expanded."""
        if isinstance(self._state, Expanded):
            logger.debug("Gallery row {} collapsed", self._state.index)
        self._state = COLLAPSED

    def reset(self, rows: int | Sequence[object]) -> None:
        """Adopt a new row set and force `Collapsed`.

        Accepts either a row count or the new view itself so the layout can be
        registered directly as a `Catalog` listener.
        """
        self._row_count = rows if isinstance(rows, int) else len(rows)
        self._state = COLLAPSED

    def geometry(self) -> GalleryGeometry:
        return compute_geometry(self._row_count, self._state, self._metrics)

    def row_offset(self, index: int) -> float:
        self._check_index(index)
        return row_offset(index, self._state, self._metrics)

    @property
    def content_height(self) -> float:
        return content_height(self._row_count, self._state, self._metrics)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._row_count:
            raise IndexError(f"row {index} outside {self._row_count} rows")
