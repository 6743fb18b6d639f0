"""MainWindow: search field over the gallery, wired to `GalleryVM`.

All view-model mutation happens in slots on the UI thread. Network work runs
on the thread pool and comes back through the signals declared here.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QImage, QKeySequence, QShortcut
from PySide6.QtWidgets import QLineEdit, QMainWindow
from loguru import logger

from app.viewmodels.image_vm import ImageVM
from app.viewmodels.main_vm import GalleryVM
from app.views.constants import DETAIL_MODE_INLINE, DETAIL_MODE_OVERLAY
from app.views.dialogs.image_detail_dialog import ImageDetailDialog
from app.views.gallery_view import GalleryView
from app.views.image_tasks import TaskRunner
from app.views.layout.layout_manager import LayoutManager
from core.services.interfaces import FetchResult, SaveResult


class MainWindow(QMainWindow):
    """Gallery window: search, inline or overlay detail, save and upload."""

    imageLoaded = Signal(str, str, object, object)  # token, url, bytes, QImage
    catalogFetched = Signal(object)  # FetchResult
    saveFinished = Signal(object)  # SaveResult

    def __init__(
        self,
        vm: GalleryVM,
        image_service: Any | None = None,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow.

        Args:
            vm: Gallery view-model owning catalog and layout state
            image_service: Service providing `get_image_bytes(url)`
            settings: Settings instance for configuration
        """
        super().__init__()
        self._vm = vm
        self._img = image_service
        self._settings = settings
        self._detail_mode = DETAIL_MODE_INLINE
        if settings is not None:
            mode = str(settings.get("gallery.detail_mode", DETAIL_MODE_INLINE)).lower()
            if mode in (DETAIL_MODE_INLINE, DETAIL_MODE_OVERLAY):
                self._detail_mode = mode
            else:
                logger.warning("Unknown gallery.detail_mode {!r}, using inline", mode)

        self._loaded: dict[str, tuple[bytes, QImage]] = {}
        self._pending: set[str] = set()

        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self) -> None:
        self.setWindowTitle("Pet Gallery")
        self.layout_manager = LayoutManager(self)

        self.search = QLineEdit()
        self.search.setPlaceholderText("Search title or description")
        self.search.setClearButtonEnabled(True)

        self.gallery = GalleryView()
        self._runner = TaskRunner(service=self._img, receiver=self)

        central = self.layout_manager.setup_main_layout(self.search, self.gallery)
        self.setCentralWidget(central)
        self.layout_manager.setup_initial_window_size()
        self.statusBar().showMessage("Ready", 3000)

    def _connect_signals(self) -> None:
        self.search.textChanged.connect(self.on_search_changed)
        self._cancel_shortcut = QShortcut(QKeySequence(Qt.Key_Escape), self.search)
        self._cancel_shortcut.activated.connect(self.on_search_cancelled)
        self.gallery.rowTapped.connect(self.on_row_tapped)
        self.gallery.saveRequested.connect(self.on_save_requested)
        self.imageLoaded.connect(self._on_image_loaded)
        self.catalogFetched.connect(self._on_catalog_fetched)
        self.saveFinished.connect(self._on_save_finished)

    # Fetch
    def start_fetch(self) -> None:
        """Fetch the catalog in the background."""
        generation = self._vm.begin_fetch()
        self.statusBar().showMessage("Loading images...")
        self._runner.run_fetch(lambda: self._vm.fetch(generation))

    def _on_catalog_fetched(self, result: FetchResult | Exception) -> None:
        if isinstance(result, Exception):
            self.statusBar().showMessage(f"Failed to load images: {result}", 5000)
            return
        if not self._vm.is_current(result):
            return
        if result.error is not None:
            self.statusBar().showMessage(f"Failed to load images: {result.error}", 5000)
            return
        if self._vm.apply_fetch(result):
            logger.info("Images fetched successfully, count: {}", len(self._vm.catalog.full))
            self.refresh_rows()
            self.statusBar().showMessage(f"{self._vm.row_count} images", 3000)

    # Rows
    def refresh_rows(self) -> None:
        """Rebuild the gallery from the current filtered view."""
        items: list[ImageVM] = self._vm.items()
        self.gallery.set_items(items, self._vm.geometry())
        for item in items:
            url = item.image_url
            if url in self._loaded:
                self.gallery.set_row_image(url, self._loaded[url][1])
            elif url not in self._pending:
                self._pending.add(url)
                self._runner.request_row_image(url, self._vm.generation)

    def _on_image_loaded(self, token: str, url: str, data: Any, image: Any) -> None:
        self._pending.discard(url)
        if data is None or image is None:
            return
        self._loaded[url] = (data, image)
        self.gallery.set_row_image(url, image)
        logger.debug("Image loaded successfully for {} ({})", url, token)

    # Search
    def on_search_changed(self, text: str) -> None:
        self._vm.set_query(text)
        self.refresh_rows()

    def on_search_cancelled(self) -> None:
        self.search.blockSignals(True)
        self.search.clear()
        self.search.blockSignals(False)
        self._vm.clear_query()
        self.refresh_rows()

    # Detail
    def on_row_tapped(self, index: int) -> None:
        if self._detail_mode == DETAIL_MODE_OVERLAY:
            self._show_overlay(index)
            return
        self._vm.tap_row(index)
        self.gallery.apply_geometry(self._vm.geometry())

    def _show_overlay(self, index: int) -> None:
        record = self._vm.catalog.record_at(index)
        loaded = self._loaded.get(record.image_url)
        dialog = ImageDetailDialog(ImageVM(record), loaded[1] if loaded else None, self)
        if dialog.exec():
            self.on_save_requested(index)

    # Save
    def on_save_requested(self, index: int) -> None:
        record = self._vm.catalog.record_at(index)
        loaded = self._loaded.get(record.image_url)
        if loaded is None:
            logger.warning("Save ignored, image not loaded: {}", record.image_url)
            self.statusBar().showMessage("Image not loaded yet", 3000)
            return
        data = loaded[0]
        self.statusBar().showMessage(f"Saving {record.title}...")
        self._runner.run_save(lambda: self._vm.save(record, data))

    def _on_save_finished(self, result: SaveResult | Exception) -> None:
        if isinstance(result, Exception):
            self.statusBar().showMessage(f"Save failed: {result}", 5000)
            return
        local = "saved locally" if result.stored else "local save failed"
        remote = "uploaded" if result.upload.success else f"upload failed ({result.upload.error})"
        self.statusBar().showMessage(f"{result.record.title}: {local}, {remote}", 5000)
