"""Two-phase upload: obtain a target URL, then POST a multipart form to it.

Phase 2 never runs unless phase 1 produced a target. Failures are returned
as an `UploadResult` carrying the error; nothing is retried.
"""

from __future__ import annotations

from collections.abc import Callable
import uuid
from urllib.parse import urlsplit

from loguru import logger

from core.errors import GalleryError, TargetUnavailable, UploadRejected
from core.models import UploadSession
from core.services.interfaces import INetworkClient, UploadResult

JPEG_QUALITY = 0.75

JpegEncoder = Callable[[bytes, float], bytes]


def make_boundary() -> str:
    return f"Boundary-{uuid.uuid4().hex.upper()}"


class UploadPipeline:
    """Sequences the upload handshake over an injected network client."""

    def __init__(
        self,
        client: INetworkClient,
        encoder: JpegEncoder,
        app_id: str,
        boundary_factory: Callable[[], str] = make_boundary,
    ) -> None:
        """Create an UploadPipeline.

        Args:
            client: Performs the GET for the target and the multipart POST.
            encoder: `encoder(image_bytes, quality)` returning JPEG bytes;
                raises `DecodeFailure` for undecodable input.
            app_id: Value sent in the `appid` field; must not be blank.
            boundary_factory: Produces a fresh multipart boundary per attempt.

        Raises:
            ValueError: `app_id` is blank.
        """
        if not app_id or not app_id.strip():
            raise ValueError("upload app_id must not be blank")
        self._client = client
        self._encoder = encoder
        self._app_id = app_id
        self._boundary_factory = boundary_factory

    @property
    def app_id(self) -> str:
        return self._app_id

    def request_target(self) -> str:
        """Phase 1: ask the server where to upload.

        Raises:
            TargetUnavailable: The request failed or returned no usable URL.
        """
        try:
            url = self._client.request_upload_url()
        except GalleryError as ex:
            raise TargetUnavailable("could not obtain upload target", cause=ex) from ex
        parts = urlsplit(url or "")
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise TargetUnavailable(f"malformed upload target {url!r}")
        logger.info("Upload target obtained: {}", url)
        return url

    def prepare(self, image: bytes, target: str, app_id: str, original_url: str) -> UploadSession:
        """Encode `image` as JPEG at quality 0.75 and bundle it with the form fields."""
        payload = self._encoder(image, JPEG_QUALITY)
        return UploadSession(
            target_url=target,
            app_id=app_id,
            original_url=original_url,
            payload=payload,
            boundary=self._boundary_factory(),
        )

    def submit(
        self, image: bytes, target: str, app_id: str | None, original_url: str
    ) -> UploadResult:
        """Phase 2: POST the multipart form; success iff HTTP 200."""
        try:
            session = self.prepare(image, target, app_id or self._app_id, original_url)
            status = self._client.post_upload(session)
        except GalleryError as ex:
            logger.error("Upload to {} failed: {}", target, ex)
            return UploadResult(success=False, target_url=target, error=ex)

        if status != 200:
            rejected = UploadRejected(status)
            logger.error("Upload to {} rejected: HTTP {}", target, status)
            return UploadResult(
                success=False, target_url=target, status_code=status, error=rejected
            )

        logger.info("Image uploaded: original={} ({} bytes)", original_url, len(session.payload))
        return UploadResult(success=True, target_url=target, status_code=status)

    def upload(self, image: bytes, original_url: str) -> UploadResult:
        """Run both phases for one image; phase 2 is skipped if phase 1 fails."""
        try:
            target = self.request_target()
        except TargetUnavailable as ex:
            logger.error("Upload aborted before submit: {}", ex)
            return UploadResult(success=False, error=ex)
        return self.submit(image, target, self._app_id, original_url)
