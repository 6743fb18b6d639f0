from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import GalleryVM
from app.views.main_window import MainWindow
from core.models import LayoutMetrics
from core.services.upload_service import UploadPipeline
from infrastructure.catalog_repository import HttpCatalogRepository
from infrastructure.image_service import ImageService, encode_jpeg
from infrastructure.logging import init_logging
from infrastructure.network_client import NetworkClient
from infrastructure.photo_store import LocalPhotoStore
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _layout_metrics(settings: JsonSettings) -> LayoutMetrics:
    defaults = LayoutMetrics()
    return LayoutMetrics(
        row_height=settings.get_float("layout.row_height", defaults.row_height),
        margin=settings.get_float("layout.margin", defaults.margin),
        detail_height=settings.get_float("layout.detail_height", defaults.detail_height),
        top_inset=settings.get_float("layout.top_inset", defaults.top_inset),
    )


def main() -> int:
    init_logging()
    settings = JsonSettings(BASE_DIR / "settings.json")
    app_id = str(settings.get("upload.app_id") or "").strip()
    if not app_id:
        logger.error("upload.app_id is not set in settings.json")
        return 2

    app = QApplication(sys.argv)

    client = NetworkClient.from_settings(settings)
    repo = HttpCatalogRepository(client)
    img = ImageService(client, settings)
    pipeline = UploadPipeline(client, encoder=encode_jpeg, app_id=app_id)
    store = LocalPhotoStore(str(settings.get("storage.images_dir")))
    vm = GalleryVM(repo, pipeline, photo_store=store, metrics=_layout_metrics(settings))

    win = MainWindow(vm=vm, image_service=img, settings=settings)
    win.show()
    win.start_fetch()

    try:
        return app.exec()
    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
