"""
app/clients/load_driver.py

Concurrent load generator for the ingestion server.

Requests are spread over a bounded thread pool; every worker thread owns
its own IngestionClient (and therefore its own requests.Session). There is
no retry: each request is counted exactly once as a success or a failure.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from app.clients.ingestion_client import IngestionClient, IngestionClientError

logger = logging.getLogger(__name__)

REPORT_PAYLOAD = {"type": "file_transfer"}
_LOGGED_FAILURE_LIMIT = 20


class LoadMode(str, Enum):
    REPORT = "report"
    UPLOAD = "upload"


@dataclass(frozen=True)
class RequestFailure:
    """
    One failed request: either an HTTP status or a transport error.
    """

    index: int
    status_code: int | None
    detail: str


@dataclass(frozen=True)
class LoadReport:
    """
    Aggregate outcome of one load run.
    """

    mode: LoadMode
    total: int
    succeeded: int
    failed: int
    elapsed_seconds: float
    failures: list[RequestFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, object]:
        return {
            "mode": self.mode.value,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "failures": [
                {
                    "index": failure.index,
                    "status_code": failure.status_code,
                    "detail": failure.detail,
                }
                for failure in self.failures
            ],
        }


def upload_file_name(index: int) -> str:
    return f"load-{index:05d}.bin"


def upload_payload(index: int) -> bytes:
    """
    Deterministic per-request content so stored files can be checked afterwards.
    """

    return f"load-driver payload #{index}\n".encode("utf-8") * (1 + index % 8)


class LoadDriver:
    """
    Issues ``total_requests`` independent requests with at most
    ``max_workers`` in flight.
    """

    def __init__(
        self,
        *,
        client_factory: Callable[[], IngestionClient],
        total_requests: int = 1000,
        max_workers: int = 64,
        mode: LoadMode = LoadMode.REPORT,
    ) -> None:
        if total_requests < 1:
            raise ValueError("total_requests must be positive.")
        if max_workers < 1:
            raise ValueError("max_workers must be positive.")
        self._client_factory = client_factory
        self._total_requests = total_requests
        self._max_workers = max_workers
        self._mode = LoadMode(mode)
        self._local = threading.local()
        self._clients: list[IngestionClient] = []
        self._clients_lock = threading.Lock()

    def run(self) -> LoadReport:
        self._log_run(
            logging.INFO,
            "load_run_started",
            total=self._total_requests,
            max_workers=self._max_workers,
        )
        started = time.monotonic()
        try:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                results = list(executor.map(self._send_one, range(self._total_requests)))
        finally:
            self._close_clients()
        elapsed = time.monotonic() - started

        failures = [failure for failure in results if failure is not None]
        report = LoadReport(
            mode=self._mode,
            total=self._total_requests,
            succeeded=self._total_requests - len(failures),
            failed=len(failures),
            elapsed_seconds=elapsed,
            failures=failures,
        )
        self._log_run(
            logging.INFO if report.all_succeeded else logging.WARNING,
            "load_run_finished",
            total=report.total,
            succeeded=report.succeeded,
            failed=report.failed,
            elapsed_seconds=round(elapsed, 3),
            failed_indices=[failure.index for failure in failures[:_LOGGED_FAILURE_LIMIT]],
        )
        return report

    def _log_run(self, level: int, event: str, **fields: object) -> None:
        """
        Emit one load-run event as a compact JSON line tagged with the mode.
        """

        payload = {"event": event, "mode": self._mode.value, **fields}
        logger.log(level, json.dumps(payload, sort_keys=True))

    def _client(self) -> IngestionClient:
        client = getattr(self._local, "client", None)
        if client is None:
            client = self._client_factory()
            self._local.client = client
            with self._clients_lock:
                self._clients.append(client)
        return client

    def _send_one(self, index: int) -> RequestFailure | None:
        client = self._client()
        try:
            if self._mode is LoadMode.UPLOAD:
                response = client.upload_file(
                    file_name=upload_file_name(index),
                    content=upload_payload(index),
                )
            else:
                response = client.post_report(REPORT_PAYLOAD)
        except IngestionClientError as exc:
            return RequestFailure(index=index, status_code=None, detail=str(exc))

        if response.status_code != 200:
            return RequestFailure(index=index, status_code=response.status_code, detail=response.text)
        logger.debug("Request %d received response: %s", index, response.text)
        return None

    def _close_clients(self) -> None:
        with self._clients_lock:
            clients = list(self._clients)
            self._clients.clear()
        for client in clients:
            client.close()
