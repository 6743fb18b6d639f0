"""Core domain models for catalog records, gallery geometry and uploads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ImageRecord:
    """A single catalog entry decoded from the remote `/pets` listing."""

    title: str
    description: str
    image_url: str
    created: str


@dataclass(frozen=True)
class LayoutMetrics:
    """Fixed sizes used to lay out gallery rows.

    Attributes:
        row_height: Height of one image row.
        margin: Vertical gap after every row.
        detail_height: Height of the detail block shown below the expanded row.
        top_inset: Leading offset applied before the first row.
    """

    row_height: float = 200.0
    margin: float = 10.0
    detail_height: float = 120.0
    top_inset: float = 0.0

    @property
    def row_pitch(self) -> float:
        """Distance between the tops of two consecutive collapsed rows."""
        return self.row_height + self.margin


@dataclass(frozen=True)
class Collapsed:
    """No row is expanded."""


@dataclass(frozen=True)
class Expanded:
    """Row `index` of the filtered view shows its detail block."""

    index: int


ExpansionState = Union[Collapsed, Expanded]

COLLAPSED = Collapsed()


@dataclass(frozen=True)
class RowGeometry:
    index: int
    y: float
    height: float


@dataclass(frozen=True)
class DetailGeometry:
    index: int
    y: float
    height: float


@dataclass(frozen=True)
class GalleryGeometry:
    """Vertical placement of every row plus the optional detail block."""

    rows: tuple[RowGeometry, ...]
    detail: DetailGeometry | None
    content_height: float

    def row_offsets(self) -> list[float]:
        """Return the `y` of each row in view order."""
        return [row.y for row in self.rows]


@dataclass(frozen=True)
class UploadSession:
    """Everything needed for one phase-2 upload attempt.

    Attributes:
        target_url: Server-issued POST destination from phase 1.
        app_id: Identifier sent in the `appid` part.
        original_url: Source `image_url` sent in the `original` part.
        payload: JPEG bytes sent in the `file` part.
        boundary: Multipart boundary announced in the Content-Type header.
    """

    target_url: str
    app_id: str
    original_url: str
    payload: bytes
    boundary: str
