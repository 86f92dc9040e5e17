"""
app/services package marker.
"""

from app.services.command_router import CommandRouter, get_command_router
from app.services.device_authenticator import (
    CredentialStore,
    DeviceAuthenticator,
    StaticCredentialStore,
    get_device_authenticator,
)
from app.services.sequence_counter import SequenceCounter, get_greeting_counter
from app.services.upload_service import UploadService, get_upload_service

__all__ = [
    "CommandRouter",
    "get_command_router",
    "CredentialStore",
    "DeviceAuthenticator",
    "StaticCredentialStore",
    "get_device_authenticator",
    "SequenceCounter",
    "get_greeting_counter",
    "UploadService",
    "get_upload_service",
]
