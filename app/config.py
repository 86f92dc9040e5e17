"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Mapping

_DEFAULT_DEVICE_CREDENTIALS = "device123:password123"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


# ---------------------------------------------------------------------------
# Credential parsing
# ---------------------------------------------------------------------------


class CredentialConfigError(ValueError):
    """
    Raised when the configured device credential source is malformed.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = tuple(errors)


def parse_credential_pairs(raw: str) -> dict[str, str]:
    """
    Parse ``id:password`` pairs separated by commas.

    Every malformed pair is collected before raising so the operator sees
    all problems at once.
    """

    credentials: dict[str, str] = {}
    errors: list[str] = []
    for position, chunk in enumerate(raw.split(","), start=1):
        pair = chunk.strip()
        if not pair:
            continue
        if ":" not in pair:
            errors.append(f"credential #{position} is not in 'device_id:password' form")
            continue
        device_id, password = pair.split(":", 1)
        device_id = device_id.strip()
        if not device_id:
            errors.append(f"credential #{position} has an empty device id")
            continue
        credentials[device_id] = password.strip()

    if errors:
        raise CredentialConfigError(errors)
    return credentials


def load_credential_file(path: str | Path) -> dict[str, str]:
    """
    Read a JSON object mapping device ids to passwords.
    """

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise CredentialConfigError([f"credential file '{path}' is not readable: {exc}"]) from exc
    except ValueError as exc:
        raise CredentialConfigError([f"credential file '{path}' is not valid JSON"]) from exc

    if not isinstance(payload, dict):
        raise CredentialConfigError([f"credential file '{path}' must contain a JSON object"])

    errors: list[str] = []
    credentials: dict[str, str] = {}
    for device_id, password in payload.items():
        if not str(device_id).strip():
            errors.append("credential file contains an empty device id")
            continue
        if not isinstance(password, str):
            errors.append(f"password for device '{device_id}' must be a string")
            continue
        credentials[str(device_id).strip()] = password

    if errors:
        raise CredentialConfigError(errors)
    return credentials


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServerSettings:
    """
    Listen address and logging for the ingestion server process.
    """

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings shared by the report and upload endpoints.
    """

    storage_root: Path = Path("./uploaded_files")
    credentials: Mapping[str, str] = field(default_factory=dict)
    greeting_wrap_at: int = 100


@dataclass(frozen=True)
class ClientSettings:
    """
    Target and identity used by the ingestion client and load driver.
    """

    base_url: str = "http://localhost:8080"
    device_id: str = "device123"
    password: str = "password123"
    file_type: str = "log"
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class LoadDriverSettings:
    """
    Concurrency settings for load runs.
    """

    total_requests: int = 1000
    max_workers: int = 64


def resolve_device_credentials() -> dict[str, str]:
    """
    Resolve the device allow-list.

    Priority:
    1) DEVICE_CREDENTIALS_FILE (JSON object)
    2) DEVICE_CREDENTIALS (comma-separated id:password pairs)
    3) the built-in mock device
    """

    credential_file = _get_optional_str_env("DEVICE_CREDENTIALS_FILE")
    if credential_file is not None:
        return load_credential_file(credential_file)
    return parse_credential_pairs(_get_str_env("DEVICE_CREDENTIALS", _DEFAULT_DEVICE_CREDENTIALS))


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """
    Return cached server settings from environment variables.
    """

    return ServerSettings(
        host=_get_str_env("APP_HOST", "0.0.0.0"),
        port=_get_int_env("APP_PORT", 8080),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings.

    Raises CredentialConfigError if the credential source is malformed.
    """

    return IngestionSettings(
        storage_root=Path(_get_str_env("STORAGE_ROOT", "./uploaded_files")),
        credentials=resolve_device_credentials(),
        greeting_wrap_at=max(2, _get_int_env("GREETING_WRAP_AT", 100)),
    )


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    """
    Return cached client settings from environment variables.
    """

    return ClientSettings(
        base_url=_get_str_env("INGESTION_BASE_URL", "http://localhost:8080").rstrip("/"),
        device_id=_get_str_env("INGESTION_DEVICE_ID", "device123"),
        password=_get_str_env("INGESTION_PASSWORD", "password123"),
        file_type=_get_str_env("INGESTION_FILE_TYPE", "log"),
        timeout_seconds=max(0.1, _get_float_env("INGESTION_TIMEOUT_SECONDS", 10.0)),
    )


@lru_cache(maxsize=1)
def get_load_driver_settings() -> LoadDriverSettings:
    """
    Return cached load driver settings from environment variables.
    """

    return LoadDriverSettings(
        total_requests=max(1, _get_int_env("LOAD_TOTAL_REQUESTS", 1000)),
        max_workers=max(1, _get_int_env("LOAD_MAX_WORKERS", 64)),
    )
