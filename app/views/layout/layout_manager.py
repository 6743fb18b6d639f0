"""LayoutManager: Manages main window layout and sizing."""

from __future__ import annotations

from PySide6.QtWidgets import QApplication, QMainWindow, QVBoxLayout, QWidget


class LayoutManager:
    """Builds the search-over-gallery layout and sizes the window."""

    # Layout constants
    WINDOW_WIDTH_RATIO = 0.3
    WINDOW_HEIGHT_RATIO = 0.8
    MIN_WINDOW_WIDTH = 360

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to manage layout for
        """
        self.window = main_window

    def setup_main_layout(self, search_widget: QWidget, gallery_widget: QWidget) -> QWidget:
        """Stack the search field above the gallery.

        Returns:
            Central widget configured with the layout
        """
        central = QWidget(self.window)
        root = QVBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)
        root.addWidget(search_widget)
        root.addWidget(gallery_widget, 1)
        return central

    def setup_initial_window_size(self) -> None:
        """Setup a tall, phone-like window based on screen dimensions."""
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        rect = screen.availableGeometry()
        width = max(self.MIN_WINDOW_WIDTH, int(rect.width() * self.WINDOW_WIDTH_RATIO))
        height = int(rect.height() * self.WINDOW_HEIGHT_RATIO)
        self.window.resize(width, height)
