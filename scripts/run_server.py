"""
Run the ingestion server with uvicorn.
"""

from __future__ import annotations

import argparse
import os

import uvicorn

from app.config import get_server_settings


def main() -> int:
    settings = get_server_settings()
    parser = argparse.ArgumentParser(description="Run the device ingestion server.")
    parser.add_argument("--host", default=settings.host, help="Listen address.")
    parser.add_argument("--port", type=int, default=settings.port, help="Listen port.")
    parser.add_argument(
        "--storage-root",
        dest="storage_root",
        default=None,
        help="Directory that receives per-device upload folders.",
    )
    args = parser.parse_args()

    if args.storage_root:
        os.environ["STORAGE_ROOT"] = args.storage_root

    print(f"Server is running on {args.host}:{args.port}")
    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
