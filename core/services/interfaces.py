"""Core service interfaces and shared result structures.

This module defines the results returned to the UI layer for fetch, upload
and save actions, plus the narrow interfaces of the collaborators the core
services drive (network client, image encoder, photo store).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from core.errors import GalleryError
from core.models import ImageRecord, UploadSession


@dataclass
class FetchResult:
    """Outcome of a catalog fetch.

    Attributes:
        records: Decoded records on success.
        error: The failure that ended the fetch, if any.
        generation: Fetch stamp used to discard stale completions.
    """

    records: list[ImageRecord] | None = None
    error: GalleryError | None = None
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.records is not None


@dataclass
class UploadResult:
    """Outcome of the two-phase upload.

    Attributes:
        success: True only when phase 2 answered HTTP 200.
        target_url: Phase-1 target, when one was obtained.
        status_code: Phase-2 HTTP status, when a response arrived.
        error: The failure that ended the attempt, if any.
    """

    success: bool
    target_url: str | None = None
    status_code: int | None = None
    error: GalleryError | None = None


@dataclass
class SaveResult:
    """Combined outcome of a save action (local copy plus upload).

    Attributes:
        record: The record whose image was saved.
        stored_path: Path of the local copy when it was written.
        store_error: Reason the local copy failed, if it did.
        upload: Result of the upload pipeline.
    """

    record: ImageRecord
    stored_path: str | None
    store_error: str | None
    upload: UploadResult

    @property
    def stored(self) -> bool:
        return self.stored_path is not None


class INetworkClient(Protocol):
    """The three HTTP operations the gallery needs."""

    def fetch_catalog(self) -> list[dict[str, Any]]:
        """GET the catalog listing and return the decoded JSON array."""
        raise NotImplementedError

    def request_upload_url(self) -> str:
        """GET an upload destination and return its `url` field."""
        raise NotImplementedError

    def post_upload(self, session: UploadSession) -> int:
        """POST the session as a multipart form and return the HTTP status code."""
        raise NotImplementedError


class IPhotoStore(Protocol):
    """Persists a local copy of an image."""

    def save(self, image: bytes) -> str:
        """Store `image` and return the written path."""
        raise NotImplementedError
