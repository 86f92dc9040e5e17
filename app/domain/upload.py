"""
app/domain/upload.py

Domain models used by the upload flow.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.storage.types import StoredFileMetadata


@dataclass(frozen=True)
class UploadRequest:
    """
    One file-upload attempt as received from a device.

    ``content`` is None when the request carried no ``file`` part; empty
    bytes are a valid (empty) file.
    """

    device_id: str
    password: str | None
    file_name: str
    file_type: str
    content: bytes | None


@dataclass(frozen=True)
class UploadOutcome:
    """
    Result of handling one upload: HTTP status plus plain-text body.
    """

    status_code: int
    body: str
    stored_file: StoredFileMetadata | None = None

    @property
    def succeeded(self) -> bool:
        return self.stored_file is not None
