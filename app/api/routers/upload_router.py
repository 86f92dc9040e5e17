"""
app/api/routers/upload_router.py

Device file upload HTTP endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.api.dependencies import get_upload_request
from app.domain.upload import UploadRequest
from app.services.upload_service import UploadService, get_upload_service

router = APIRouter(tags=["upload"])


@router.post("/upload", response_class=PlainTextResponse)
def upload_file(
    upload_request: UploadRequest = Depends(get_upload_request),
    upload_service: UploadService = Depends(get_upload_service),
) -> PlainTextResponse:
    """
    Store one file for an authenticated device.

    Runs on the server's worker thread pool so filesystem I/O for one upload
    never blocks other requests.
    """

    outcome = upload_service.handle(upload_request)
    return PlainTextResponse(content=outcome.body, status_code=outcome.status_code)
