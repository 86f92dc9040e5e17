"""
app/api/dependencies.py

Shared FastAPI dependencies for request extraction.
"""

from __future__ import annotations

import logging

from fastapi import Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from app.domain.upload import UploadRequest

logger = logging.getLogger(__name__)


async def get_upload_request(request: Request) -> UploadRequest:
    """
    Collect the ``Device-ID``/``Password``/``File-Type`` headers and the
    multipart ``file`` part into one UploadRequest.

    A malformed multipart body, or a ``file`` field that is not a file,
    reads as "no file part"; credentials are judged by the upload service
    either way. A client that disconnects mid-upload never reaches the
    handler.
    """

    device_id = request.headers.get("Device-ID", "")
    password = request.headers.get("Password")
    file_type = request.headers.get("File-Type", "")

    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as exc:
        logger.info("Unreadable upload body device_id=%s error=%s", device_id, exc)
        return UploadRequest(
            device_id=device_id,
            password=password,
            file_name="",
            file_type=file_type,
            content=None,
        )

    try:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            return UploadRequest(
                device_id=device_id,
                password=password,
                file_name="",
                file_type=file_type,
                content=None,
            )
        content = await file.read()
    finally:
        await form.close()

    return UploadRequest(
        device_id=device_id,
        password=password,
        file_name=file.filename or "",
        file_type=file_type,
        content=content,
    )
