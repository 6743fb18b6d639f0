"""HTTP access to the image catalog and upload endpoints.

One `NetworkClient` wraps one `httpx.Client` and is shared by every caller.
httpx exceptions are translated into the gallery error kinds.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from core.errors import DecodeFailure, InvalidEndpoint, TransportFailure
from core.models import UploadSession

UPLOAD_FILENAME = "image.jpg"
UPLOAD_CONTENT_TYPE = "image/jpeg"


def multipart_content_type(boundary: str) -> str:
    """Value of the request `Content-Type` header for `boundary`."""
    return f"multipart/form-data; boundary={boundary}"


def upload_form(session: UploadSession) -> dict[str, Any]:
    """Request arguments for the upload POST: appid, original, then file.

    httpx encodes `data` fields before `files` and takes the boundary from
    the explicit Content-Type header.
    """
    return {
        "data": {"appid": session.app_id, "original": session.original_url},
        "files": {"file": (UPLOAD_FILENAME, session.payload, UPLOAD_CONTENT_TYPE)},
        "headers": {"Content-Type": multipart_content_type(session.boundary)},
    }


class NetworkClient:
    """Performs the catalog GET, the upload-target GET and the upload POST."""

    def __init__(
        self,
        base_url: str,
        catalog_path: str = "/pets",
        upload_path: str = "/upload",
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a NetworkClient.

        Args:
            base_url: Scheme and host of the catalog server.
            catalog_path: Path returning the JSON array of records.
            upload_path: Path returning `{"url": ...}` for uploads.
            timeout: Seconds per request; None waits indefinitely.
            client: Pre-built httpx client (tests inject a mock transport).
        """
        self._base_url = base_url.rstrip("/")
        self._catalog_path = catalog_path
        self._upload_path = upload_path
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_settings(cls, settings: Any) -> NetworkClient:
        timeout = settings.get("network.timeout_seconds")
        return cls(
            base_url=str(settings.get("network.base_url")),
            catalog_path=str(settings.get("network.catalog_path", "/pets")),
            upload_path=str(settings.get("network.upload_path", "/upload")),
            timeout=float(timeout) if timeout is not None else None,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> NetworkClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def endpoint(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def fetch_catalog(self) -> list[dict[str, Any]]:
        """Return the raw catalog array.

        Raises:
            DecodeFailure: Body is not a JSON array.
        """
        data = self._get_json(self.endpoint(self._catalog_path))
        if not isinstance(data, list):
            raise DecodeFailure(f"catalog is {type(data).__name__}, expected array")
        return data

    def request_upload_url(self) -> str:
        """Return the `url` field of the upload endpoint's JSON object.

        Raises:
            DecodeFailure: Body lacks a string `url`.
        """
        data = self._get_json(self.endpoint(self._upload_path))
        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise DecodeFailure(f"upload response has no url: {data!r}")
        return url

    def fetch_bytes(self, url: str) -> bytes:
        """Download `url` and return the body."""
        response = self._request("GET", url)
        if response.is_error:
            raise TransportFailure(f"GET {url} returned HTTP {response.status_code}")
        return response.content

    def post_upload(self, session: UploadSession) -> int:
        """POST the upload form and return the status without judging it."""
        response = self._request("POST", session.target_url, **upload_form(session))
        return response.status_code

    def _get_json(self, url: str) -> Any:
        response = self._request("GET", url)
        if response.is_error:
            raise TransportFailure(f"GET {url} returned HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as ex:
            raise DecodeFailure(f"GET {url} returned invalid JSON", cause=ex) from ex

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("{} {}", method, url)
        try:
            return self._client.request(method, url, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as ex:
            raise InvalidEndpoint(f"cannot request {url!r}", cause=ex) from ex
        except httpx.HTTPError as ex:
            raise TransportFailure(f"{method} {url} failed", cause=ex) from ex
