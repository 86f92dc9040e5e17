"""
Per-device filesystem layout for uploaded artifacts.

Files land at ``<storage_root>/<device_id>/<file_name>``. The layout is the
only writer to that tree.
"""

from __future__ import annotations

import contextlib
import hashlib
import uuid
from datetime import datetime, timezone
from pathlib import Path

from app.storage.errors import FileStorageError, InvalidFileNameError
from app.storage.types import StoredFileMetadata

_FORBIDDEN_SEGMENTS = {".", ".."}
_FORBIDDEN_CHARACTERS = ("/", "\\", "\x00")


def validate_path_segment(value: str, *, label: str = "file name") -> str:
    """
    Return ``value`` unchanged if it is one non-empty path segment.

    Raises InvalidFileNameError for empty values, ``.``/``..`` and anything
    containing a separator or NUL byte.
    """

    if not value or not value.strip():
        raise InvalidFileNameError(f"Empty {label}.")
    if value in _FORBIDDEN_SEGMENTS:
        raise InvalidFileNameError(f"Invalid {label}: {value!r}.")
    if any(character in value for character in _FORBIDDEN_CHARACTERS):
        raise InvalidFileNameError(f"Invalid {label}: {value!r}.")
    return value


class StorageLayout:
    """
    Local filesystem storage keyed by device id.
    """

    def __init__(self, root_dir: str | Path = "uploaded_files") -> None:
        self._root_dir = Path(root_dir)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def ensure_directory(self, device_id: str) -> Path:
        """
        Create the device directory if needed. Safe to call concurrently.
        """

        directory = self._root_dir / validate_path_segment(device_id, label="device id")
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileStorageError(f"Failed to create storage directory '{directory}'.") from exc
        return directory

    def resolve_path(self, device_id: str, file_name: str) -> Path:
        safe_device_id = validate_path_segment(device_id, label="device id")
        safe_file_name = validate_path_segment(file_name)
        return self._root_dir / safe_device_id / safe_file_name

    def save(self, *, device_id: str, file_name: str, content: bytes) -> StoredFileMetadata:
        """
        Write ``content`` atomically; an existing file with the same name is replaced.
        """

        target = self.resolve_path(device_id, file_name)
        self.ensure_directory(device_id)

        # Unique per write so concurrent uploads of one name never share a temp
        # file; the name is bounded regardless of the length of file_name.
        tmp_path = target.parent / f".{uuid.uuid4().hex}.tmp"
        try:
            with tmp_path.open("wb") as handle:
                handle.write(content)
            tmp_path.replace(target)
        except OSError as exc:
            raise FileStorageError(f"Failed to write '{target}'.") from exc
        finally:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)

        return StoredFileMetadata(
            device_id=device_id,
            file_name=file_name,
            path=target,
            file_size_bytes=len(content),
            checksum=hashlib.sha256(content).hexdigest(),
            stored_at=datetime.now(timezone.utc),
        )
