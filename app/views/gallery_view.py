from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtGui import QImage, QMouseEvent, QPixmap
from PySide6.QtWidgets import QLabel, QPushButton, QScrollArea, QVBoxLayout, QWidget

from app.viewmodels.image_vm import ImageVM
from app.views.constants import (
    DETAIL_CORNER_RADIUS_PX,
    DETAIL_PADDING_PX,
    DETAIL_SAVE_BUTTON_HEIGHT_PX,
    PLACEHOLDER_COLOR,
    ROW_CORNER_RADIUS_PX,
    ROW_SIDE_INSET_PX,
)
from core.models import GalleryGeometry


class _RowLabel(QLabel):
    """Image row; reports clicks with its position in the filtered view."""

    clicked = Signal(int)

    def __init__(self, index: int, item: ImageVM, parent: QWidget) -> None:
        super().__init__(parent)
        self.index = index
        self.item = item
        self.setAlignment(Qt.AlignCenter)
        self.setScaledContents(False)
        self.setStyleSheet(
            f"background: {PLACEHOLDER_COLOR}; border-radius: {ROW_CORNER_RADIUS_PX}px;"
        )
        self.setCursor(Qt.PointingHandCursor)
        self._source: QPixmap | None = None

    def set_image(self, image: QImage) -> None:
        self._source = QPixmap.fromImage(image)
        self._refit()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._refit()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.index)
        super().mouseReleaseEvent(event)

    def _refit(self) -> None:
        if self._source is None or self.width() <= 0 or self.height() <= 0:
            return
        # aspect fill, cropped to the row
        scaled = self._source.scaled(
            self.width(), self.height(), Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation
        )
        x = max(0, (scaled.width() - self.width()) // 2)
        y = max(0, (scaled.height() - self.height()) // 2)
        self.setPixmap(scaled.copy(x, y, self.width(), self.height()))


class _DetailBlock(QWidget):
    """Title, description and Save button shown below the expanded row."""

    saveClicked = Signal()

    def __init__(self, item: ImageVM, parent: QWidget) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet(f"background: white; border-radius: {DETAIL_CORNER_RADIUS_PX}px;")
        root = QVBoxLayout(self)
        root.setContentsMargins(DETAIL_PADDING_PX, 5, DETAIL_PADDING_PX, 5)
        title = QLabel(item.title_text)
        description = QLabel(item.description_text)
        description.setWordWrap(True)
        self.save_button = QPushButton("Save")
        self.save_button.setFixedHeight(DETAIL_SAVE_BUTTON_HEIGHT_PX)
        self.save_button.setStyleSheet("background: #007aff; color: white; border-radius: 5px;")
        root.addWidget(title)
        root.addWidget(description, 1)
        root.addWidget(self.save_button)
        self.save_button.clicked.connect(self.saveClicked.emit)


class GalleryView(QScrollArea):
    """Scrollable list of image rows placed from a `GalleryGeometry`.

    Widgets are rebuilt when the row set changes and only repositioned when
    the expansion changes; all positions come from the geometry passed in.
    """

    rowTapped = Signal(int)
    saveRequested = Signal(int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWidgetResizable(False)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self._content = QWidget()
        self.setWidget(self._content)
        self._rows: list[_RowLabel] = []
        self._detail: _DetailBlock | None = None
        self._geometry: GalleryGeometry | None = None
        self.viewport().installEventFilter(self)

    def set_items(self, items: list[ImageVM], geometry: GalleryGeometry) -> None:
        """Replace all rows with `items` and lay them out."""
        for row in self._rows:
            row.deleteLater()
        self._rows = []
        self._drop_detail()
        for i, item in enumerate(items):
            row = _RowLabel(i, item, self._content)
            row.clicked.connect(self.rowTapped.emit)
            row.show()
            self._rows.append(row)
        self.apply_geometry(geometry)

    def apply_geometry(self, geometry: GalleryGeometry) -> None:
        """Move rows and the detail block to the positions in `geometry`."""
        self._geometry = geometry
        width = max(1, self.viewport().width())
        row_width = max(1, width - 2 * ROW_SIDE_INSET_PX)
        for row, geo in zip(self._rows, geometry.rows):
            row.setGeometry(ROW_SIDE_INSET_PX, int(geo.y), row_width, int(geo.height))

        detail = geometry.detail
        if detail is None:
            self._drop_detail()
        else:
            if self._detail is None or self._detail.property("row") != detail.index:
                self._drop_detail()
                block = _DetailBlock(self._rows[detail.index].item, self._content)
                block.setProperty("row", detail.index)
                index = detail.index
                block.saveClicked.connect(lambda: self.saveRequested.emit(index))
                block.show()
                self._detail = block
            self._detail.setGeometry(ROW_SIDE_INSET_PX, int(detail.y), row_width, int(detail.height))
        self._content.resize(width, int(geometry.content_height))

    def set_row_image(self, url: str, image: QImage) -> None:
        for row in self._rows:
            if row.item.image_url == url:
                row.set_image(image)

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if obj is self.viewport() and event.type() == QEvent.Resize and self._geometry:
            self.apply_geometry(self._geometry)
        return super().eventFilter(obj, event)

    def _drop_detail(self) -> None:
        if self._detail is not None:
            self._detail.deleteLater()
            self._detail = None
