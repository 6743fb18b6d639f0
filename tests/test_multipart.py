from __future__ import annotations

import httpx

from core.models import UploadSession
from core.services.upload_service import make_boundary
from infrastructure.network_client import multipart_content_type, upload_form

BOUNDARY = "Boundary-TEST"
IMAGE = b"\xff\xd8\xffJPEGDATA\xff\xd9"


def encode(session: UploadSession) -> bytes:
    return httpx.Request("POST", session.target_url, **upload_form(session)).read()


def make_session(payload: bytes = IMAGE) -> UploadSession:
    return UploadSession(
        target_url="https://up.example.com/x",
        app_id="a@b.com",
        original_url="http://x/1.png",
        payload=payload,
        boundary=BOUNDARY,
    )


class TestUploadForm:
    def test_exact_layout(self):
        expected = (
            b"--Boundary-TEST\r\n"
            b'Content-Disposition: form-data; name="appid"\r\n'
            b"\r\n"
            b"a@b.com\r\n"
            b"--Boundary-TEST\r\n"
            b'Content-Disposition: form-data; name="original"\r\n'
            b"\r\n"
            b"http://x/1.png\r\n"
            b"--Boundary-TEST\r\n"
            b'Content-Disposition: form-data; name="file"; filename="image.jpg"\r\n'
            b"Content-Type: image/jpeg\r\n"
            b"\r\n" + IMAGE + b"\r\n"
            b"--Boundary-TEST--\r\n"
        )
        assert encode(make_session()) == expected

    def test_three_parts_in_order(self):
        body = encode(make_session(b"img"))
        chunks = body.split(b"--" + BOUNDARY.encode())
        # leading empty chunk, three parts, closing "--\r\n"
        assert chunks[0] == b""
        assert chunks[-1] == b"--\r\n"
        parts = chunks[1:-1]
        assert len(parts) == 3
        assert b'name="appid"' in parts[0]
        assert b'name="original"' in parts[1]
        assert b'name="file"' in parts[2]

    def test_request_announces_boundary(self):
        request = httpx.Request("POST", "https://up.example.com/x", **upload_form(make_session()))
        assert request.headers["content-type"] == "multipart/form-data; boundary=Boundary-TEST"

    def test_content_type_header(self):
        assert multipart_content_type(BOUNDARY) == "multipart/form-data; boundary=Boundary-TEST"

    def test_boundaries_are_unique(self):
        assert make_boundary() != make_boundary()
        assert make_boundary().startswith("Boundary-")
