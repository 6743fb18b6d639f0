"""Catalog persistence over HTTP.

Decodes the `/pets` listing into `ImageRecord` objects. The listing is
decoded all-or-nothing: a single malformed entry fails the whole fetch.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from loguru import logger

from core.errors import DecodeFailure
from core.models import ImageRecord

FIELD_MAP = {
    "title": "title",
    "description": "description",
    "url": "image_url",
    "created": "created",
}


def decode_record(raw: Any, position: int = 0) -> ImageRecord:
    """Map one JSON object to an `ImageRecord`.

    Raises:
        DecodeFailure: The entry is not an object or a field is missing or
            not a string.
    """
    if not isinstance(raw, dict):
        raise DecodeFailure(f"catalog entry {position} is not an object")
    values: dict[str, str] = {}
    for json_key, attr in FIELD_MAP.items():
        value = raw.get(json_key)
        if not isinstance(value, str):
            raise DecodeFailure(f"catalog entry {position} has invalid {json_key!r}: {value!r}")
        values[attr] = value
    return ImageRecord(**values)


class HttpCatalogRepository:
    """Load image records through a `NetworkClient`."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def load(self) -> Iterator[ImageRecord]:
        """Yield decoded records in server order."""
        raw_items = self._client.fetch_catalog()
        records = [decode_record(raw, i) for i, raw in enumerate(raw_items)]
        logger.info("Catalog fetched: {} records", len(records))
        yield from records
