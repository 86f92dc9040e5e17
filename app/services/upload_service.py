"""
app/services/upload_service.py

Service layer for authenticated device file uploads.

Handling order per request:

    1. DeviceAuthenticator.verify: 401 on mismatch
    2. file part present: 400 when missing
    3. StorageLayout.save: 400 on an unsafe file name,
       500 on filesystem failure

Every outcome is terminal for the current request only. Storage failures
are logged with full detail but the client only sees a generic message.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import status

from app.config import get_ingestion_settings
from app.domain.upload import UploadOutcome, UploadRequest
from app.services.device_authenticator import DeviceAuthenticator, get_device_authenticator
from app.storage.errors import FileStorageError, InvalidFileNameError
from app.storage.layout import StorageLayout

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("app.audit")

UNAUTHORIZED_BODY = "Unauthorized"
NO_FILE_BODY = "No file uploaded"
INVALID_FILE_NAME_BODY = "Invalid file name"
STORAGE_FAILURE_BODY = "Internal Server Error"


class UploadService:
    """
    Coordinates authentication, payload checks, and persistence for uploads.
    """

    def __init__(self, *, authenticator: DeviceAuthenticator, storage: StorageLayout) -> None:
        self._authenticator = authenticator
        self._storage = storage

    @property
    def storage(self) -> StorageLayout:
        return self._storage

    def handle(self, request: UploadRequest) -> UploadOutcome:
        if not self._authenticator.verify(request.device_id, request.password):
            audit_logger.warning("Unauthorized device: %s", request.device_id)
            return UploadOutcome(status_code=status.HTTP_401_UNAUTHORIZED, body=UNAUTHORIZED_BODY)

        if request.content is None:
            audit_logger.info("%s failed to upload file: %s", request.device_id, NO_FILE_BODY)
            return UploadOutcome(status_code=status.HTTP_400_BAD_REQUEST, body=NO_FILE_BODY)

        try:
            stored = self._storage.save(
                device_id=request.device_id,
                file_name=request.file_name,
                content=request.content,
            )
        except InvalidFileNameError as exc:
            audit_logger.warning(
                "%s failed to upload file: %s",
                request.device_id,
                exc,
            )
            return UploadOutcome(status_code=status.HTTP_400_BAD_REQUEST, body=INVALID_FILE_NAME_BODY)
        except FileStorageError:
            logger.exception(
                "Upload storage failure device_id=%s file_name=%r",
                request.device_id,
                request.file_name,
            )
            return UploadOutcome(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                body=STORAGE_FAILURE_BODY,
            )

        audit_logger.info("%s uploaded file: %s", request.device_id, request.file_name)
        logger.debug(
            "Stored upload device_id=%s file_type=%s bytes=%d sha256=%s",
            request.device_id,
            request.file_type,
            stored.file_size_bytes,
            stored.checksum,
        )
        return UploadOutcome(
            status_code=status.HTTP_200_OK,
            body=f"File uploaded successfully: {request.file_name}",
            stored_file=stored,
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_upload_service() -> UploadService:
    """
    Build and cache the upload service with env-driven settings.
    """

    settings = get_ingestion_settings()
    return UploadService(
        authenticator=get_device_authenticator(),
        storage=StorageLayout(settings.storage_root),
    )
