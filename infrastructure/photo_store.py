"""Local persistence of saved images.

Each saved image is written as `<images_dir>/<uuid>.png`. The store is
independent of the upload pipeline: a failed write never blocks an upload
and a failed upload never removes a written file.
"""

from __future__ import annotations

import os
from pathlib import Path
import uuid

from loguru import logger

from infrastructure.image_service import encode_png


class LocalPhotoStore:
    """Writes PNG copies of images into a directory."""

    def __init__(self, images_dir: str | Path) -> None:
        self._dir = Path(os.path.expandvars(str(images_dir))).expanduser()

    @property
    def directory(self) -> Path:
        return self._dir

    def save(self, image: bytes) -> str:
        """Store `image` as PNG and return the written path.

        Raises:
            DecodeFailure: `image` is not a decodable image.
            OSError: The directory or file could not be written.
        """
        png = encode_png(image)
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self._dir / f"{uuid.uuid4()}.png"
        with open(path, "wb") as f:
            f.write(png)
        logger.info("Image saved locally: {} ({} bytes)", path, len(png))
        return str(path)
