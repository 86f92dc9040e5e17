from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI

from app.config import CredentialConfigError, load_env_files, resolve_device_credentials


def _validate_env() -> None:
    """
    Validate the ingestion configuration at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - The device credential source must parse and hold at least one device.
    - STORAGE_ROOT must not point at an existing regular file.
    - APP_PORT, when set, must be an integer in 1..65535.
    """

    load_env_files()

    errors: list[str] = []

    # --- Device credentials ---------------------------------------------
    try:
        credentials = resolve_device_credentials()
    except CredentialConfigError as exc:
        errors.extend(f"Device credentials: {error}" for error in exc.errors)
    else:
        if not credentials:
            errors.append(
                "No device credentials configured. Set DEVICE_CREDENTIALS or DEVICE_CREDENTIALS_FILE."
            )

    # --- Storage root ---------------------------------------------------
    storage_root = os.getenv("STORAGE_ROOT", "").strip()
    if storage_root and Path(storage_root).is_file():
        errors.append(f"STORAGE_ROOT='{storage_root}' is a file, not a directory.")

    # --- Listen port ----------------------------------------------------
    raw_port = os.getenv("APP_PORT", "").strip()
    if raw_port:
        if not raw_port.isdigit() or not 1 <= int(raw_port) <= 65535:
            errors.append(f"APP_PORT='{raw_port}' is not a valid TCP port.")

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Device Ingestion Gateway",
        version="1.0.0",
    )

    from app.api.routers import greeting_router, report_router, upload_router

    application.include_router(report_router)
    application.include_router(upload_router)
    application.include_router(greeting_router)

    logging.getLogger(__name__).info("Ingestion routes registered: /report, /upload, /hi, /health")
    return application


app = create_app()
