"""ViewModel coordinating the catalog, gallery layout and save actions."""

from __future__ import annotations

from loguru import logger

from app.viewmodels.image_vm import ImageVM
from core.errors import GalleryError
from core.models import ExpansionState, GalleryGeometry, ImageRecord, LayoutMetrics
from core.services.catalog_service import Catalog
from core.services.interfaces import FetchResult, IPhotoStore, SaveResult
from core.services.layout_service import GalleryLayout
from core.services.upload_service import UploadPipeline


class GalleryVM:
    """Gallery view-model.

    Mutating methods (`apply_fetch`, `load`, `set_query`, `tap_row`) must be
    called on the UI thread. `fetch` and `save` only read their arguments and
    may run on worker threads.
    """

    def __init__(
        self,
        repo,
        pipeline: UploadPipeline,
        photo_store: IPhotoStore | None = None,
        metrics: LayoutMetrics | None = None,
    ) -> None:
        """Create a GalleryVM.

        Args:
            repo: Repository with a `load()` method yielding `ImageRecord`.
            pipeline: Upload pipeline used by save actions.
            photo_store: Optional local store for saved copies.
            metrics: Row geometry sizes (defaults to `LayoutMetrics()`).
        """
        self._repo = repo
        self._pipeline = pipeline
        self._store = photo_store
        self.catalog = Catalog()
        self.layout = GalleryLayout(metrics)
        self.catalog.add_listener(self.layout.reset)
        self._generation = 0

    # Fetch
    def begin_fetch(self) -> int:
        """Stamp a new fetch; earlier in-flight fetches become stale."""
        self._generation += 1
        return self._generation

    @property
    def generation(self) -> int:
        """Stamp of the most recent fetch."""
        return self._generation

    def fetch(self, generation: int = 0) -> FetchResult:
        """Fetch and decode the catalog without touching view state."""
        try:
            records = list(self._repo.load())
        except GalleryError as ex:
            logger.error("Error fetching images: {}", ex)
            return FetchResult(error=ex, generation=generation)
        return FetchResult(records=records, generation=generation)

    def is_current(self, result: FetchResult) -> bool:
        """True unless a newer fetch was started after `result`'s."""
        if result.generation and result.generation != self._generation:
            logger.info(
                "Dropping stale fetch {} (current {})", result.generation, self._generation
            )
            return False
        return True

    def apply_fetch(self, result: FetchResult) -> bool:
        """Install a fetch result; returns False when it was not applied."""
        if not self.is_current(result):
            return False
        if not result.ok:
            return False
        self.load(result.records or [])
        return True

    def refresh(self) -> FetchResult:
        """Fetch and apply synchronously."""
        result = self.fetch(self.begin_fetch())
        self.apply_fetch(result)
        return result

    # Catalog
    def load(self, records: list[ImageRecord]) -> None:
        self.catalog.load(records)

    def set_query(self, text: str) -> None:
        self.catalog.set_query(text)

    def clear_query(self) -> None:
        self.catalog.clear_query()

    def items(self) -> list[ImageVM]:
        """Display wrappers for the filtered view, in order."""
        return [ImageVM(r) for r in self.catalog.view()]

    @property
    def row_count(self) -> int:
        return len(self.catalog)

    # Layout
    def tap_row(self, index: int) -> ExpansionState:
        return self.layout.tap(index)

    def geometry(self) -> GalleryGeometry:
        return self.layout.geometry()

    @property
    def expanded_record(self) -> ImageRecord | None:
        index = self.layout.expanded_index
        if index is None:
            return None
        return self.catalog.record_at(index)

    # Save
    def save(self, record: ImageRecord, image: bytes) -> SaveResult:
        """Store a local copy and upload `image`; neither blocks the other."""
        stored_path: str | None = None
        store_error: str | None = None
        if self._store is not None:
            try:
                stored_path = self._store.save(image)
            except (GalleryError, OSError) as ex:
                store_error = str(ex)
                logger.error("Failed to save image locally: {}", ex)
        else:
            store_error = "no photo store configured"

        upload = self._pipeline.upload(image, record.image_url)
        return SaveResult(
            record=record, stored_path=stored_path, store_error=store_error, upload=upload
        )
