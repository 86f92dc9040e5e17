"""
Storage-layer exceptions for device upload flows.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for device storage failures."""


class InvalidFileNameError(StorageError):
    """Raised when a file name or device id is not a single safe path segment."""


class FileStorageError(StorageError):
    """Raised when creating a device directory or writing a file fails."""
