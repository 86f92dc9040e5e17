"""
app/services/device_authenticator.py

Device credential verification against an immutable allow-list.
"""

from __future__ import annotations

import hmac
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Protocol

from app.config import get_ingestion_settings


class CredentialStore(Protocol):
    """
    Lookup of the expected password for a device id.
    """

    def password_for(self, device_id: str) -> str | None:
        ...


class StaticCredentialStore:
    """
    Read-only credential store built once at startup.
    """

    def __init__(self, credentials: Mapping[str, str]) -> None:
        for device_id in credentials:
            if not device_id:
                raise ValueError("Device ids must be non-empty.")
        self._credentials = MappingProxyType(dict(credentials))

    def password_for(self, device_id: str) -> str | None:
        return self._credentials.get(device_id)

    def __len__(self) -> int:
        return len(self._credentials)


class DeviceAuthenticator:
    """
    Verifies a claimed device identity. Never raises for unknown devices.
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    def verify(self, device_id: str | None, password: str | None) -> bool:
        if not device_id or password is None:
            return False
        expected = self._store.password_for(device_id)
        if expected is None:
            return False
        return hmac.compare_digest(expected.encode("utf-8"), password.encode("utf-8"))


@lru_cache(maxsize=1)
def get_device_authenticator() -> DeviceAuthenticator:
    """
    Build and cache the authenticator from configured credentials.
    """

    settings = get_ingestion_settings()
    return DeviceAuthenticator(StaticCredentialStore(settings.credentials))
