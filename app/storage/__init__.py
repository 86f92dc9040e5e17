"""
app/storage package marker.
"""

from app.storage.errors import FileStorageError, InvalidFileNameError, StorageError
from app.storage.layout import StorageLayout, validate_path_segment
from app.storage.types import StoredFileMetadata

__all__ = [
    "FileStorageError",
    "InvalidFileNameError",
    "StorageError",
    "StorageLayout",
    "StoredFileMetadata",
    "validate_path_segment",
]
