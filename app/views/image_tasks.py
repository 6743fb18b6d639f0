from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from PySide6.QtGui import QImage
from loguru import logger

from app.views.constants import ROW_THUMB_SIDE_PX
from core.errors import GalleryError


def pil_to_qimage(pil_img: Any) -> QImage | None:
    """Convert a Pillow image to `QImage` and detach from the source buffer."""
    try:
        mode = pil_img.mode
        if mode not in ("RGBA", "RGB"):
            pil_img = pil_img.convert("RGBA")
            mode = pil_img.mode
        if mode == "RGB":
            data = pil_img.tobytes("raw", "RGB")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
            )
        else:
            data = pil_img.tobytes("raw", "RGBA")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
            )
        if qimg.isNull():
            return None
        return qimg.copy()
    except (ValueError, TypeError) as ex:
        logger.debug("PIL->QImage convert failed: {}", ex)
        return None


class _ImageTask(QRunnable):
    """QRunnable for background image loading.

    Emits `receiver.imageLoaded(token, url, data, image)` upon completion:
    `data` is the downloaded original, `image` a copy bounded to `side`
    pixels. Both are None on failure. The receiver is expected to
    own a Qt `Signal(str, str, object, object)` named `imageLoaded`.
    """

    def __init__(
        self, *, url: str, service: Any, receiver: QObject, token: str, side: int
    ) -> None:
        super().__init__()
        self._url = url
        self._side = side
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        data: bytes | None = None
        img: QImage | None = None
        try:
            data = self._service.get_image_bytes(self._url)
            img = pil_to_qimage(self._service.get_thumbnail(self._url, self._side))
            if img is None:
                logger.error("Failed to create image from data for URL {}", self._url)
                data, img = None, None
        except GalleryError as ex:
            logger.error("Error loading image from URL {}: {}", self._url, ex)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.exception("Image task failed for {}: {}", self._url, ex)
        self._receiver.imageLoaded.emit(self._token, self._url, data, img)  # type: ignore[attr-defined]


class _CallTask(QRunnable):
    """Run `fn()` off the UI thread and hand its result to `emit`.

    `emit` must be a bound Qt signal `emit` so delivery is queued onto the
    receiver's thread.
    """

    def __init__(self, fn: Callable[[], Any], emit: Callable[[Any], None], label: str) -> None:
        super().__init__()
        self._fn = fn
        self._emit = emit
        self._label = label

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._fn()
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.exception("{} task failed: {}", self._label, ex)
            result = ex
        self._emit(result)


class TaskRunner:
    """Dispatches network-bound work to the global thread pool.

    Image tokens use the format "row|{generation}|{url}".
    """

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_row_image(self, url: str, generation: int) -> str:
        """Request the image for a row. Returns the token string."""
        token = f"row|{generation}|{url}"
        if self._service is None:
            return token
        task = _ImageTask(
            url=url,
            service=self._service,
            receiver=self._receiver,
            token=token,
            side=ROW_THUMB_SIDE_PX,
        )
        self._pool.start(task)
        return token

    def run_fetch(self, fn: Callable[[], Any]) -> None:
        """Run a catalog fetch; result goes to `receiver.catalogFetched`."""
        self._pool.start(_CallTask(fn, self._receiver.catalogFetched.emit, "Fetch"))  # type: ignore[attr-defined]

    def run_save(self, fn: Callable[[], Any]) -> None:
        """Run a save action; result goes to `receiver.saveFinished`."""
        self._pool.start(_CallTask(fn, self._receiver.saveFinished.emit, "Save"))  # type: ignore[attr-defined]
