"""
tests/test_load_driver.py

LoadDriver aggregation with stub clients, and the concurrency property
against a live uvicorn server: 1000 concurrent uploads from one device
with distinct file names leave exactly 1000 intact files.
"""

from __future__ import annotations

import json
import logging
import socket
import threading
import time
from collections.abc import Iterator
from dataclasses import dataclass

import pytest
import uvicorn

from app.clients.ingestion_client import IngestionClient, IngestionClientError
from app.clients.load_driver import LoadDriver, LoadMode, upload_file_name, upload_payload
from app.config import ClientSettings
from app.services.upload_service import UploadService, get_upload_service


@dataclass
class _StubResponse:
    status_code: int
    text: str = ""


class _StubClient:
    """Records calls; fails every request whose index is listed."""

    def __init__(self, *, failing_names: set[str] = frozenset(), raising: bool = False) -> None:
        self.failing_names = failing_names
        self.raising = raising
        self.reports: list[object] = []
        self.uploads: list[tuple[str, bytes]] = []
        self.closed = False

    def post_report(self, payload):
        if self.raising:
            raise IngestionClientError("connection refused")
        self.reports.append(payload)
        return _StubResponse(200, '{"type": "file_transfer_response"}')

    def upload_file(self, *, file_name: str, content: bytes, file_type=None):
        self.uploads.append((file_name, content))
        if file_name in self.failing_names:
            return _StubResponse(401, "Unauthorized")
        return _StubResponse(200, f"File uploaded successfully: {file_name}")

    def close(self) -> None:
        self.closed = True


def test_report_mode_sends_fixed_body_once_per_request() -> None:
    clients: list[_StubClient] = []

    def factory() -> _StubClient:
        client = _StubClient()
        clients.append(client)
        return client

    report = LoadDriver(client_factory=factory, total_requests=50, max_workers=4).run()

    assert report.succeeded == 50
    assert report.failed == 0
    assert report.all_succeeded
    assert 1 <= len(clients) <= 4
    assert sum(len(client.reports) for client in clients) == 50
    assert all(payload == {"type": "file_transfer"} for client in clients for payload in client.reports)
    assert all(client.closed for client in clients)


def test_failures_are_counted_without_retry() -> None:
    failing = {upload_file_name(3), upload_file_name(7)}
    stub = _StubClient(failing_names=failing)

    report = LoadDriver(
        client_factory=lambda: stub,
        total_requests=10,
        max_workers=1,
        mode=LoadMode.UPLOAD,
    ).run()

    assert report.total == 10
    assert report.failed == 2
    assert report.succeeded == 8
    assert sorted(failure.index for failure in report.failures) == [3, 7]
    assert all(failure.status_code == 401 for failure in report.failures)
    assert len(stub.uploads) == 10


def test_transport_errors_become_failures() -> None:
    report = LoadDriver(
        client_factory=lambda: _StubClient(raising=True),
        total_requests=5,
        max_workers=2,
    ).run()

    assert report.failed == 5
    assert all(failure.status_code is None for failure in report.failures)
    assert report.to_dict()["failed"] == 5


def test_rejects_non_positive_sizes() -> None:
    with pytest.raises(ValueError):
        LoadDriver(client_factory=_StubClient, total_requests=0)
    with pytest.raises(ValueError):
        LoadDriver(client_factory=_StubClient, max_workers=0)


# ---------------------------------------------------------------------------
# Live server
# ---------------------------------------------------------------------------


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture()
def live_server(upload_service: UploadService) -> Iterator[str]:
    from app.main import create_app

    application = create_app()
    application.dependency_overrides[get_upload_service] = lambda: upload_service

    port = _free_port()
    server = uvicorn.Server(
        uvicorn.Config(application, host="127.0.0.1", port=port, log_level="warning", backlog=2048)
    )
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if time.monotonic() > deadline or not thread.is_alive():
            raise RuntimeError("uvicorn did not start")
        time.sleep(0.05)

    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        server.should_exit = True
        thread.join(timeout=10)


def _client_factory(base_url: str, *, password: str = "password123"):
    settings = ClientSettings(base_url=base_url, device_id="device123", password=password, timeout_seconds=30.0)
    return lambda: IngestionClient(settings=settings)


def test_concurrent_reports_against_live_server(live_server: str) -> None:
    report = LoadDriver(
        client_factory=_client_factory(live_server),
        total_requests=200,
        max_workers=32,
        mode=LoadMode.REPORT,
    ).run()

    assert report.failed == 0, report.to_dict()


def test_thousand_concurrent_uploads_store_every_file(live_server: str, storage) -> None:
    total = 1000
    report = LoadDriver(
        client_factory=_client_factory(live_server),
        total_requests=total,
        max_workers=32,
        mode=LoadMode.UPLOAD,
    ).run()

    assert report.succeeded == total, report.to_dict()

    device_dir = storage.root_dir / "device123"
    stored = sorted(path.name for path in device_dir.iterdir())
    assert stored == sorted(upload_file_name(index) for index in range(total))
    for index in range(total):
        assert (device_dir / upload_file_name(index)).read_bytes() == upload_payload(index)


def test_live_upload_with_wrong_password_is_rejected(live_server: str, storage) -> None:
    client = _client_factory(live_server, password="wrong")()
    try:
        response = client.upload_file(file_name="data.json", content=b"{}")
    finally:
        client.close()

    assert response.status_code == 401
    assert response.text == "Unauthorized"
    assert not storage.root_dir.exists()


def test_client_raises_on_unreachable_server() -> None:
    settings = ClientSettings(base_url=f"http://127.0.0.1:{_free_port()}", timeout_seconds=2.0)
    client = IngestionClient(settings=settings)
    try:
        with pytest.raises(IngestionClientError):
            client.post_report({"type": "status"})
    finally:
        client.close()


def test_run_emits_json_summary_line(caplog) -> None:
    failing = {upload_file_name(1)}
    with caplog.at_level(logging.INFO, logger="app.clients.load_driver"):
        LoadDriver(
            client_factory=lambda: _StubClient(failing_names=failing),
            total_requests=3,
            max_workers=1,
            mode=LoadMode.UPLOAD,
        ).run()

    events = [json.loads(record.getMessage()) for record in caplog.records if record.name == "app.clients.load_driver"]
    finished = [event for event in events if event["event"] == "load_run_finished"]
    assert len(finished) == 1
    assert finished[0]["mode"] == "upload"
    assert finished[0]["failed"] == 1
    assert finished[0]["failed_indices"] == [1]
