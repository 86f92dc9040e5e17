"""
Upload one local file to the ingestion server.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from app.clients.ingestion_client import IngestionClient, IngestionClientError
from app.config import get_client_settings


def main() -> int:
    client_settings = get_client_settings()

    parser = argparse.ArgumentParser(description="Upload a file as an authenticated device.")
    parser.add_argument("path", help="Local file to upload.")
    parser.add_argument("--device-id", dest="device_id", default=client_settings.device_id)
    parser.add_argument("--password", default=client_settings.password)
    parser.add_argument("--file-type", dest="file_type", default=client_settings.file_type)
    parser.add_argument("--base-url", dest="base_url", default=client_settings.base_url)
    args = parser.parse_args()

    source = Path(args.path)
    try:
        content = source.read_bytes()
    except OSError as exc:
        print(f"Failed to open file: {exc}", file=sys.stderr)
        return 1

    client = IngestionClient(
        settings=replace(
            client_settings,
            base_url=args.base_url,
            device_id=args.device_id,
            password=args.password,
            file_type=args.file_type,
        )
    )
    try:
        response = client.upload_file(file_name=source.name, content=content)
    except IngestionClientError as exc:
        print(f"File upload failed: {exc}", file=sys.stderr)
        return 1
    finally:
        client.close()

    print(f"Response code: {response.status_code}")
    print(f"Response body: {response.text}")
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())
