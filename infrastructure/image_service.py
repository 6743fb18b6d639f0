"""Image download, decoding, encoding and caching utilities.

Remote image bytes are cached in memory (LRU) and on disk keyed by URL.
Pillow handles decoding, thumbnailing and the JPEG/PNG encodes used by the
upload pipeline and the local photo store.
"""

from __future__ import annotations

from collections import OrderedDict
import hashlib
import io
from pathlib import Path
from typing import Any

from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.errors import DecodeFailure


def _compute_cache_key(url: str) -> str:
    """Compute a stable cache key from the image URL."""
    return hashlib.sha1(url.encode("utf-8", errors="ignore")).hexdigest()


def _ensure_dir(p: Path) -> None:
    """Create directory `p` if missing (including parents)."""
    p.mkdir(parents=True, exist_ok=True)


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, bytes] = OrderedDict()

    def get(self, key: str) -> bytes | None:
        """Return cached bytes for key, moving it to the MRU position."""
        item = self._data.get(key)
        if item is None:
            return None
        self._data.move_to_end(key)
        return item

    def put(self, key: str, data: bytes) -> None:
        """Insert or update `key`, evicting LRU entries when over capacity."""
        self._data[key] = data
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)

    def __len__(self) -> int:
        return len(self._data)


def decode_image(data: bytes) -> Image.Image:
    """Decode `data` into a fully loaded, EXIF-orientated Pillow image.

    Raises:
        DecodeFailure: The bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            try:
                oriented = ImageOps.exif_transpose(im)
            except (OSError, ValueError, AttributeError):
                oriented = im
            return oriented.copy()
    except (UnidentifiedImageError, OSError, ValueError) as ex:
        raise DecodeFailure("image bytes could not be decoded", cause=ex) from ex


def encode_jpeg(data: bytes, quality: float = 0.75) -> bytes:
    """Re-encode image `data` as JPEG at `quality` (0..1 scale)."""
    img = decode_image(data)
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    q = max(1, min(95, int(round(float(quality) * 100))))
    buf = io.BytesIO()
    img.save(buf, "JPEG", quality=q)
    return buf.getvalue()


def encode_png(data: bytes) -> bytes:
    """Re-encode image `data` as PNG."""
    img = decode_image(data)
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


def make_thumbnail(data: bytes, max_side: int) -> Image.Image:
    """Decode `data` and bound it to `max_side` preserving aspect ratio."""
    img = decode_image(data)
    if max_side and max_side > 0:
        resampling = getattr(Image, "Resampling", Image)
        img.thumbnail((max_side, max_side), resampling.LANCZOS)
    return img


class ImageService:
    """High-level image service with memory/disk cache over a network client."""

    def __init__(self, client: Any, settings: object | None = None) -> None:
        """Initialize caches from settings."""
        self._client = client
        self._mem_cap = 128
        self._disk_path: Path | None = None
        if settings is not None:
            try:
                self._mem_cap = int(settings.get("cache.memory_items", 128) or 128)
            except (ValueError, TypeError):
                self._mem_cap = 128
            raw_dir = settings.get("cache.disk_dir")
            if isinstance(raw_dir, str) and raw_dir:
                self._disk_path = Path(raw_dir).expanduser()
                _ensure_dir(self._disk_path)
        self._mem_cache = _LRUCache(self._mem_cap)

    def get_image_bytes(self, url: str) -> bytes:
        """Return the raw bytes for `url` via memory/disk cache or download.

        Raises:
            GalleryError: Download failed or the bytes are not an image.
        """
        key = _compute_cache_key(url)
        data = self._mem_cache.get(key)
        if data is not None:
            return data

        disk_file = self._disk_path / f"{key}.img" if self._disk_path else None
        if disk_file is not None and disk_file.exists():
            try:
                data = disk_file.read_bytes()
            except OSError as ex:
                logger.debug("Read disk cache failed for {}: {}", disk_file, ex)
                data = None
            if data:
                self._mem_cache.put(key, data)
                return data

        data = self._client.fetch_bytes(url)
        # validate before caching so broken payloads are not served again
        decode_image(data)
        logger.debug("Image loaded for {} ({} bytes)", url, len(data))
        if disk_file is not None:
            try:
                disk_file.write_bytes(data)
            except OSError as ex:
                logger.debug("Save disk cache failed for {}: {}", disk_file, ex)
        self._mem_cache.put(key, data)
        return data

    def get_thumbnail(self, url: str, size: int) -> Image.Image:
        """Return the image for `url` decoded and bounded to `size` pixels per side.

        Raises:
            GalleryError: Download failed or the bytes are not an image.
        """
        return make_thumbnail(self.get_image_bytes(url), size)
