"""Error kinds raised by gallery infrastructure and reported in results."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ENDPOINT = "InvalidEndpoint"
    TRANSPORT_FAILURE = "TransportFailure"
    DECODE_FAILURE = "DecodeFailure"
    TARGET_UNAVAILABLE = "TargetUnavailable"
    UPLOAD_REJECTED = "UploadRejected"


class GalleryError(Exception):
    """Base class for failures that terminate a single user action."""

    kind: ErrorKind

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.kind.value}: {self.message} ({self.cause})"
        return f"{self.kind.value}: {self.message}"


class InvalidEndpoint(GalleryError):
    """The configured or server-issued URL cannot be requested."""

    kind = ErrorKind.INVALID_ENDPOINT


class TransportFailure(GalleryError):
    """The request could not complete or returned an error status."""

    kind = ErrorKind.TRANSPORT_FAILURE


class DecodeFailure(GalleryError):
    """A response body or image payload could not be decoded."""

    kind = ErrorKind.DECODE_FAILURE


class TargetUnavailable(GalleryError):
    """Phase 1 of the upload handshake did not yield a usable target."""

    kind = ErrorKind.TARGET_UNAVAILABLE


class UploadRejected(GalleryError):
    """Phase 2 returned a status other than 200."""

    kind = ErrorKind.UPLOAD_REJECTED

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"upload rejected with HTTP {status_code}")
        self.status_code = status_code
