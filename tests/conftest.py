"""
Shared fixtures for ingestion tests.

All fixtures build fresh, isolated collaborators: storage lives under the
per-test ``tmp_path`` and the credential store holds the mock device only.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.services.device_authenticator import DeviceAuthenticator, StaticCredentialStore
from app.services.sequence_counter import SequenceCounter, get_greeting_counter
from app.services.upload_service import UploadService, get_upload_service
from app.storage.layout import StorageLayout

DEVICE_ID = "device123"
PASSWORD = "password123"


@pytest.fixture()
def storage(tmp_path) -> StorageLayout:
    return StorageLayout(tmp_path / "uploaded_files")


@pytest.fixture()
def authenticator() -> DeviceAuthenticator:
    return DeviceAuthenticator(StaticCredentialStore({DEVICE_ID: PASSWORD, "sensor-7": "s3cret"}))


@pytest.fixture()
def upload_service(authenticator: DeviceAuthenticator, storage: StorageLayout) -> UploadService:
    return UploadService(authenticator=authenticator, storage=storage)


@pytest.fixture()
def client(upload_service: UploadService) -> Iterator[TestClient]:
    from app.main import app

    counter = SequenceCounter(wrap_at=100)
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    app.dependency_overrides[get_greeting_counter] = lambda: counter
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def device_headers() -> dict[str, str]:
    return {"Device-ID": DEVICE_ID, "Password": PASSWORD, "File-Type": "log"}
