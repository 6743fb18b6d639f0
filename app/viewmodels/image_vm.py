"""Lightweight view model wrapper around `ImageRecord`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import ImageRecord


@dataclass
class ImageVM:
    """Expose convenient properties for bindings/templates."""

    record: ImageRecord

    @property
    def title_text(self) -> str:
        """Detail-block title label."""
        return f"Title: {self.record.title}"

    @property
    def description_text(self) -> str:
        """Detail-block description label."""
        return f"Description: {self.record.description}"

    @property
    def image_url(self) -> str:
        return self.record.image_url

    @property
    def created(self) -> str:
        return self.record.created
