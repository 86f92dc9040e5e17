"""
Typed DTOs produced by the storage layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class StoredFileMetadata:
    """
    Metadata produced by the storage layout after saving a file.
    """

    device_id: str
    file_name: str
    path: Path
    file_size_bytes: int
    checksum: str
    stored_at: datetime
