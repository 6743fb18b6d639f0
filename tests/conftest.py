# tests/conftest.py
# Shared fixtures for catalog, layout and upload tests

from __future__ import annotations

import io
from typing import Any

import pytest
from PIL import Image

from core.models import ImageRecord, LayoutMetrics, UploadSession


class FakeNetworkClient:
    """Records calls and replays canned results for the three HTTP operations."""

    def __init__(
        self,
        catalog: list[dict[str, Any]] | Exception | None = None,
        upload_url: str | Exception = "https://upload.example.com/target",
        post_status: int | Exception = 200,
    ) -> None:
        self.catalog = catalog if catalog is not None else []
        self.upload_url = upload_url
        self.post_status = post_status
        self.calls: list[str] = []
        self.posts: list[UploadSession] = []

    def fetch_catalog(self) -> list[dict[str, Any]]:
        self.calls.append("fetch_catalog")
        if isinstance(self.catalog, Exception):
            raise self.catalog
        return self.catalog

    def request_upload_url(self) -> str:
        self.calls.append("request_upload_url")
        if isinstance(self.upload_url, Exception):
            raise self.upload_url
        return self.upload_url

    def post_upload(self, session: UploadSession) -> int:
        self.calls.append("post_upload")
        self.posts.append(session)
        if isinstance(self.post_status, Exception):
            raise self.post_status
        return self.post_status


@pytest.fixture
def records() -> list[ImageRecord]:
    return [
        ImageRecord("Sunny Dog", "A dog on the beach", "http://x/1.png", "2024-01-01"),
        ImageRecord("Parrot", "Loud bird with a CAT-like stare", "http://x/2.png", "2024-01-02"),
        ImageRecord("Hamster", "Tiny wheel runner", "http://x/3.png", "2024-01-03"),
    ]


@pytest.fixture
def metrics() -> LayoutMetrics:
    return LayoutMetrics(row_height=200, margin=10, detail_height=120)


@pytest.fixture
def png_bytes() -> bytes:
    """A small RGBA PNG, so JPEG encoding has to drop alpha."""
    img = Image.new("RGBA", (32, 24), color=(100, 150, 200, 255))
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def fake_client() -> FakeNetworkClient:
    return FakeNetworkClient()


def fake_encoder(data: bytes, quality: float) -> bytes:
    return b"JPEG:" + data


@pytest.fixture
def encoder():
    return fake_encoder
