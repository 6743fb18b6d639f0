from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout

from app.viewmodels.image_vm import ImageVM


class ImageDetailDialog(QDialog):
    """Modal overlay with the full image, its labels and a Save action.

    `exec()` returns a truthy code when Save was pressed.
    """

    def __init__(self, item: ImageVM, image: QImage | None, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle(item.record.title)
        self.setModal(True)

        root = QVBoxLayout(self)

        picture = QLabel()
        picture.setAlignment(Qt.AlignCenter)
        if image is not None and not image.isNull():
            pm = QPixmap.fromImage(image)
            picture.setPixmap(pm.scaled(640, 640, Qt.KeepAspectRatio, Qt.SmoothTransformation))
        else:
            picture.setText("(image not loaded)")
        root.addWidget(picture, 1)

        title = QLabel(item.title_text)
        title.setWordWrap(True)
        description = QLabel(item.description_text)
        description.setWordWrap(True)
        root.addWidget(title)
        root.addWidget(description)

        btns = QHBoxLayout()
        self.btn_save = QPushButton("Save")
        self.btn_cancel = QPushButton("Cancel")
        self.btn_save.setEnabled(image is not None and not image.isNull())
        btns.addWidget(self.btn_save)
        btns.addStretch(1)
        btns.addWidget(self.btn_cancel)
        root.addLayout(btns)

        self.btn_save.clicked.connect(self.accept)
        self.btn_cancel.clicked.connect(self.reject)
