"""Text search over catalog records, decoupled from any UI toolkit."""

from __future__ import annotations

from collections.abc import Sequence

from core.models import ImageRecord


class SearchFilter:
    """Case-insensitive substring match against title or description.

    The filter is a pure function of `(records, query)`; it never reorders or
    copies records, so the result is always a subsequence of the input.
    """

    def apply(self, records: Sequence[ImageRecord], query: str) -> tuple[ImageRecord, ...]:
        """Return records whose title or description contains `query`.

        Args:
            records: Records in view order.
            query: Raw search text; blank text matches everything.
        """
        if not query or not query.strip():
            return tuple(records)

        needle = query.casefold()
        return tuple(r for r in records if self.matches(r, needle))

    @staticmethod
    def matches(record: ImageRecord, needle: str) -> bool:
        """True if the already case-folded `needle` occurs in either field."""
        return needle in record.title.casefold() or needle in record.description.casefold()
