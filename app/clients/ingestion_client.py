"""
app/clients/ingestion_client.py

HTTP client for the device ingestion endpoints.

One attempt per call: transport failures surface as IngestionClientError,
HTTP error statuses are returned to the caller untouched.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import ClientSettings

logger = logging.getLogger(__name__)


class IngestionClientError(RuntimeError):
    """
    Raised when a request cannot reach the ingestion server.
    """


class IngestionClient:
    """
    Sends reports and uploads on behalf of one device.
    """

    def __init__(
        self,
        *,
        settings: ClientSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = settings.base_url.rstrip("/")
        self._device_id = settings.device_id
        self._password = settings.password
        self._file_type = settings.file_type
        self._timeout_seconds = settings.timeout_seconds
        self._session = session or requests.Session()

    @property
    def device_id(self) -> str:
        return self._device_id

    def post_report(self, payload: Any) -> requests.Response:
        """
        POST a JSON report to ``/report``.
        """

        return self._send(
            method="POST",
            path="/report",
            json=payload,
        )

    def upload_file(
        self,
        *,
        file_name: str,
        content: bytes,
        file_type: str | None = None,
    ) -> requests.Response:
        """
        POST one file as the multipart ``file`` part to ``/upload``.
        """

        headers = {
            "Device-ID": self._device_id,
            "Password": self._password,
            "File-Type": file_type or self._file_type,
        }
        return self._send(
            method="POST",
            path="/upload",
            headers=headers,
            files={"file": (file_name, content)},
        )

    def close(self) -> None:
        self._session.close()

    def _send(self, *, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self._base_url}{path}"
        try:
            return self._session.request(
                method=method,
                url=url,
                timeout=self._timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.warning("Ingestion request failed url=%s error=%s", url, exc)
            raise IngestionClientError(f"{method} {url} failed: {exc}") from exc
